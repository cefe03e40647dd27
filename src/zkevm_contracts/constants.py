"""
Constants and Environment Configuration

Holds the fixed values that the permit helpers must reproduce bit-exactly
(EIP-712 type strings, type hashes, function selectors) together with the
environment-driven settings of the package.

Environment variables (a ``.env`` file in the working directory is honoured):
    - ZKEVM_ARTIFACTS_DIR:      Directory holding compiled contract JSON files
    - ZKEVM_SIGNER_PRIVATE_KEY: Private key for ``LocalAccountSigner.from_env``
    - ZKEVM_RPC_URL:            JSON-RPC endpoint used by the chain helpers
"""

import os
from pathlib import Path
from typing import Optional, Tuple

import dotenv
from eth_utils import function_signature_to_4byte_selector, keccak

dotenv.load_dotenv()

# ---------------------------------------------------------------------------
# Numeric limits
# ---------------------------------------------------------------------------

MAX_UINT256: int = 2**256 - 1

#: Order of the secp256k1 curve; valid r and s lie in ``(0, SECP256K1_N)``.
SECP256K1_N: int = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

# ---------------------------------------------------------------------------
# Networks
# ---------------------------------------------------------------------------

ZKEVM_MAINNET_CHAIN_ID: int = 1101

# ---------------------------------------------------------------------------
# EIP-712 / EIP-2612
# ---------------------------------------------------------------------------

EIP712_DOMAIN_TYPE: str = "EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)"
EIP712_DOMAIN_NO_VERSION_TYPE: str = "EIP712Domain(string name,uint256 chainId,address verifyingContract)"
PERMIT_TYPE: str = "Permit(address owner,address spender,uint256 value,uint256 nonce,uint256 deadline)"
DAI_PERMIT_TYPE: str = "Permit(address holder,address spender,uint256 nonce,uint256 expiry,bool allowed)"

EIP712_DOMAIN_TYPEHASH: bytes = keccak(text=EIP712_DOMAIN_TYPE)
PERMIT_TYPEHASH: bytes = keccak(text=PERMIT_TYPE)
DAI_PERMIT_TYPEHASH: bytes = keccak(text=DAI_PERMIT_TYPE)

#: Selectors the bridge accepts as the head of ``permitData``.
PERMIT_SELECTOR: bytes = function_signature_to_4byte_selector(
    "permit(address,address,uint256,uint256,uint8,bytes32,bytes32)"
)
DAI_PERMIT_SELECTOR: bytes = function_signature_to_4byte_selector(
    "permit(address,address,uint256,uint256,bool,uint8,bytes32,bytes32)"
)

#: EIP-712 domain version used by the bridge's wrapped tokens.
TOKEN_WRAPPED_VERSION: str = "1"

#: Magic value returned by a valid ERC-1271 ``isValidSignature`` call.
ERC1271_MAGIC_VALUE: bytes = b"\x16\x26\xba\x7e"

# ---------------------------------------------------------------------------
# Contract artifacts
# ---------------------------------------------------------------------------

#: Contract names exposed by the compiled artifact bundle.
ZKEVM_CONTRACT_NAMES: Tuple[str, ...] = (
    "PolygonZKEVMBridge",
    "PolygonZKEVMGlobalExitRoot",
    "PolygonZKEVMGlobalExitRootL2",
    "PolygonZKEVM",
    "TokenWrapped",
    "Verifier",
    "PolygonZKEVMBridgeMock",
    "ERC20PermitMock",
    "PolygonZKEVMGlobalExitRootL2Mock",
    "PolygonZKEVMGlobalExitRootMock",
    "PolygonZKEVMMock",
    "VerifierRollupHelperMock",
)


def get_artifacts_dir_from_env() -> Optional[Path]:
    """
    Load the compiled artifacts directory from environment variables.

    Environment Variable:
        - ZKEVM_ARTIFACTS_DIR: Path to a directory of ``<ContractName>.json`` files

    Returns:
        Path: Directory path, or None if not configured

    Example:
        # In your .env file:
        # ZKEVM_ARTIFACTS_DIR=./compiled-contracts
        artifacts_dir = get_artifacts_dir_from_env()
    """
    value = os.getenv("ZKEVM_ARTIFACTS_DIR")
    if not value:
        return None
    return Path(value).expanduser()


def get_private_key_from_env() -> Optional[str]:
    """
    Load the permit signer private key from environment variables.

    Environment Variable:
        - ZKEVM_SIGNER_PRIVATE_KEY: 0x-prefixed hex secp256k1 key

    Returns:
        str: Private key from environment, or None if not configured

    Note:
        The private key should be stored securely in environment variables
        and never committed to version control.
    """
    return os.getenv("ZKEVM_SIGNER_PRIVATE_KEY") or None


def get_rpc_url_from_env() -> Optional[str]:
    """
    Load the JSON-RPC endpoint used by the read-only chain helpers.

    Environment Variable:
        - ZKEVM_RPC_URL: HTTP(S) JSON-RPC endpoint (e.g. ``https://zkevm-rpc.com``)

    Returns:
        str: RPC URL, or None if not configured
    """
    return os.getenv("ZKEVM_RPC_URL") or None
