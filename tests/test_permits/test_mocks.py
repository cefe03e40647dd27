"""
Permit Test Mocks Module

Shared constants, factories and fake Web3 objects for the permit tests.
Nothing here needs a running node.

Key Components:
    - Test keys and addresses (do not use in production!)
    - Factories for valid permit requests
    - An independent EIP-2612 digest implementation used to cross-check
      the builder
    - MockWeb3Provider / make_mock_contract for the async chain helpers

Usage:
    from test_mocks import create_permit_request, MOCK_OWNER_PRIVATE_KEY

    request = create_permit_request()
"""

from typing import Any, Dict, Optional
from unittest.mock import AsyncMock, Mock

from eth_abi import encode
from eth_account import Account
from eth_keys import keys
from eth_utils import keccak
from web3 import AsyncWeb3

from zkevm_contracts.constants import ZKEVM_MAINNET_CHAIN_ID
from zkevm_contracts.permits.schemas import DaiPermitRequest, PermitRequest


# ========================================================================
# Mock Blockchain Constants
# ========================================================================

MOCK_OWNER_PRIVATE_KEY = "0x1234567890123456789012345678901234567890123456789012345678901234"
MOCK_OTHER_PRIVATE_KEY = "0xabcdefabcdefabcdefabcdefabcdefabcdefabcdefabcdefabcdefabcdefabcd"

MOCK_OWNER_ADDRESS = Account.from_key(MOCK_OWNER_PRIVATE_KEY).address
MOCK_OTHER_ADDRESS = Account.from_key(MOCK_OTHER_PRIVATE_KEY).address

# Polygon zkEVM bridge (same address on L1 and L2)
MOCK_BRIDGE_ADDRESS = "0x2a3DD3EB832aF982ec71669E178424b10Dca2EDe"
MOCK_TOKEN_ADDRESS = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"

MOCK_CHAIN_ID_ZKEVM = ZKEVM_MAINNET_CHAIN_ID
MOCK_CHAIN_ID_MAINNET = 1

MOCK_TOKEN_NAME = "TokenWrapped"
MOCK_TOKEN_VERSION = "1"

MOCK_VALUE_ONE_TOKEN = 10**18
MOCK_DEADLINE_FAR = 9999999999
MOCK_DEADLINE_PAST = 1

EIP712_DOMAIN_TYPE = "EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)"
PERMIT_TYPE = "Permit(address owner,address spender,uint256 value,uint256 nonce,uint256 deadline)"


# ========================================================================
# Factories
# ========================================================================

def create_permit_request(**overrides: Any) -> PermitRequest:
    """
    Create a valid EIP-2612 request signed-for by ``MOCK_OWNER_ADDRESS``.

    Example:
        request = create_permit_request(value=0)
    """
    fields: Dict[str, Any] = {
        "token_address": MOCK_TOKEN_ADDRESS,
        "chain_id": MOCK_CHAIN_ID_ZKEVM,
        "owner": MOCK_OWNER_ADDRESS,
        "spender": MOCK_BRIDGE_ADDRESS,
        "value": MOCK_VALUE_ONE_TOKEN,
        "nonce": 0,
        "deadline": MOCK_DEADLINE_FAR,
        "token_name": MOCK_TOKEN_NAME,
        "token_version": MOCK_TOKEN_VERSION,
    }
    fields.update(overrides)
    return PermitRequest(**fields)


def create_dai_permit_request(**overrides: Any) -> DaiPermitRequest:
    """Create a valid DAI-style request held by ``MOCK_OWNER_ADDRESS``."""
    fields: Dict[str, Any] = {
        "token_address": MOCK_TOKEN_ADDRESS,
        "chain_id": MOCK_CHAIN_ID_MAINNET,
        "holder": MOCK_OWNER_ADDRESS,
        "spender": MOCK_BRIDGE_ADDRESS,
        "nonce": 0,
        "expiry": MOCK_DEADLINE_FAR,
        "allowed": True,
        "token_name": "Dai Stablecoin",
        "token_version": "1",
    }
    fields.update(overrides)
    return DaiPermitRequest(**fields)


# ========================================================================
# Independent reference implementation
# ========================================================================

def reference_permit_digest(
    *,
    token_name: str,
    token_version: str,
    chain_id: int,
    token_address: str,
    owner: str,
    spender: str,
    value: int,
    nonce: int,
    deadline: int,
) -> bytes:
    """
    EIP-2612 digest computed by hand with ``abi.encode`` semantics, the way
    the token contract does it.
    """
    domain_separator = keccak(encode(
        ["bytes32", "bytes32", "bytes32", "uint256", "address"],
        [keccak(text=EIP712_DOMAIN_TYPE), keccak(text=token_name), keccak(text=token_version), chain_id, token_address],
    ))
    struct_hash = keccak(encode(
        ["bytes32", "address", "address", "uint256", "uint256", "uint256"],
        [keccak(text=PERMIT_TYPE), owner, spender, value, nonce, deadline],
    ))
    return keccak(b"\x19\x01" + domain_separator + struct_hash)


def reference_recover(digest: bytes, v: int, r: int, s: int) -> str:
    """Recover the signer with ``eth_keys`` directly."""
    signature = keys.Signature(vrs=(v - 27, r, s))
    return signature.recover_public_key_from_msg_hash(digest).to_checksum_address()


# ========================================================================
# Mock Web3
# ========================================================================

def make_mock_contract(**results: Any) -> Mock:
    """
    Build a fake web3 contract whose ``functions.<name>(...).call()`` returns
    ``results[name]``, or raises it when the value is an exception.

    Example:
        contract = make_mock_contract(name="TokenWrapped", nonces=3)
        await contract.functions.nonces(owner).call()  # 3
    """
    contract = Mock()
    for fn_name, result in results.items():
        if isinstance(result, Exception):
            call = AsyncMock(side_effect=result)
        else:
            call = AsyncMock(return_value=result)
        getattr(contract.functions, fn_name).return_value.call = call
    return contract


class _MockEth:
    def __init__(self, contract: Mock, chain_id: int):
        self.contract = Mock(return_value=contract)
        self._chain_id = chain_id

    @property
    def chain_id(self):
        async def _value() -> int:
            return self._chain_id
        return _value()


class MockWeb3Provider:
    """
    Stand-in for ``AsyncWeb3`` exposing just what the permit helpers use:
    ``to_checksum_address``, ``eth.chain_id`` and ``eth.contract``.
    """

    to_checksum_address = staticmethod(AsyncWeb3.to_checksum_address)

    def __init__(self, contract: Optional[Mock] = None, chain_id: int = MOCK_CHAIN_ID_ZKEVM):
        self.contract = contract if contract is not None else make_mock_contract()
        self.eth = _MockEth(self.contract, chain_id)
