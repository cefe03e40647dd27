"""
Read-only On-chain Helpers for Permits

The builder itself never talks to a node: the caller supplies the owner's
current nonce and the token's domain fields.  These helpers read them from
the token contract through an ``AsyncWeb3`` provider so that callers do not
have to hand-assemble a ``PermitRequest``.

No transactions are sent from here.
"""

import logging
from typing import Optional, Tuple

from web3 import AsyncHTTPProvider, AsyncWeb3

from ..constants import TOKEN_WRAPPED_VERSION, get_rpc_url_from_env
from ..exceptions import BlockchainInteractionError, ConfigurationError
from .ERC20_ABI import get_domain_separator_abi, get_metadata_abi, get_nonces_abi
from .schemas import PermitRequest
from .signatures import domain_separator

logger = logging.getLogger(__name__)


def web3_from_env() -> AsyncWeb3:
    """
    Build an ``AsyncWeb3`` client from ``ZKEVM_RPC_URL``.

    Raises:
        ConfigurationError: If ``ZKEVM_RPC_URL`` is not set.
    """
    rpc_url = get_rpc_url_from_env()
    if not rpc_url:
        raise ConfigurationError("ZKEVM_RPC_URL is not set")
    return AsyncWeb3(AsyncHTTPProvider(rpc_url))


async def query_token_metadata(w3: AsyncWeb3, token: str) -> Tuple[str, str]:
    """
    Read the EIP-712 ``name`` and ``version`` of a token.

    ``version()`` is optional on ERC-20 tokens.  When the call fails the
    bridge's wrapped-token version ``"1"`` is assumed, which is also the
    OpenZeppelin ``ERC20Permit`` default.

    Args:
        w3:    AsyncWeb3 instance connected to the token's chain.
        token: Token contract address.

    Returns:
        ``(name, version)``

    Raises:
        BlockchainInteractionError: If ``name()`` cannot be read.
    """
    contract = w3.eth.contract(address=w3.to_checksum_address(token), abi=get_metadata_abi())

    try:
        name = await contract.functions.name().call()
    except Exception as e:
        raise BlockchainInteractionError(f"Could not read name() of {token}: {e}", rpc_method="name") from e

    try:
        version = await contract.functions.version().call()
    except Exception as e:
        logger.debug("token %s has no usable version(): %s", token, e)
        version = TOKEN_WRAPPED_VERSION

    if not isinstance(version, str) or not version.strip():
        version = TOKEN_WRAPPED_VERSION

    return name, version.strip()


async def query_permit_nonce(w3: AsyncWeb3, token: str, owner: str) -> int:
    """
    Read ``nonces(owner)`` from a permit token.

    Raises:
        BlockchainInteractionError: If the call fails.
    """
    contract = w3.eth.contract(address=w3.to_checksum_address(token), abi=get_nonces_abi())
    try:
        return int(await contract.functions.nonces(w3.to_checksum_address(owner)).call())
    except Exception as e:
        raise BlockchainInteractionError(f"Could not read nonces({owner}) on {token}: {e}", rpc_method="nonces") from e


async def query_domain_separator(w3: AsyncWeb3, token: str) -> bytes:
    """
    Read a token's EIP-712 domain separator.

    Tries ``DOMAIN_SEPARATOR()`` first and falls back to ``domainSeparator()``.

    Returns:
        The raw 32-byte separator.

    Raises:
        BlockchainInteractionError: If neither selector answers.
    """
    contract = w3.eth.contract(address=w3.to_checksum_address(token), abi=get_domain_separator_abi())
    try:
        return bytes(await contract.functions.DOMAIN_SEPARATOR().call())
    except Exception as first_error:
        logger.debug("DOMAIN_SEPARATOR() failed on %s: %s", token, first_error)
    try:
        return bytes(await contract.functions.domainSeparator().call())
    except Exception as e:
        raise BlockchainInteractionError(
            f"Token {token} exposes neither DOMAIN_SEPARATOR() nor domainSeparator(): {e}",
            rpc_method="DOMAIN_SEPARATOR",
        ) from e


async def fetch_permit_request(
    w3: AsyncWeb3,
    *,
    token: str,
    owner: str,
    spender: str,
    value: int,
    deadline: int,
    token_version: Optional[str] = None,
) -> PermitRequest:
    """
    Assemble a ``PermitRequest`` from on-chain state.

    Reads the chain id, the token's name (and version, unless given), and
    ``nonces(owner)``.  The nonce is a snapshot: another permit redeemed
    before this one invalidates it.

    Args:
        w3:            AsyncWeb3 instance.
        token:         Permit token address.
        owner:         Token holder.
        spender:       Address being approved (usually the bridge).
        value:         Allowance in smallest units.
        deadline:      Expiry Unix timestamp.
        token_version: Override for the domain version.

    Returns:
        A validated ``PermitRequest``.

    Raises:
        BlockchainInteractionError: If any read fails.
        InvalidInput: If the assembled fields are invalid.
    """
    try:
        chain_id = int(await w3.eth.chain_id)
    except Exception as e:
        raise BlockchainInteractionError(f"Could not read chain id: {e}", rpc_method="eth_chainId") from e

    name, version = await query_token_metadata(w3, token)
    nonce = await query_permit_nonce(w3, token, owner)

    return PermitRequest(
        token_address=token,
        chain_id=chain_id,
        owner=owner,
        spender=spender,
        value=value,
        nonce=nonce,
        deadline=deadline,
        token_name=name,
        token_version=token_version if token_version is not None else version,
    )


async def check_domain_separator(w3: AsyncWeb3, request: PermitRequest) -> bool:
    """
    Compare the locally computed domain separator with the token's.

    A mismatch means the request's ``token_name``, ``token_version`` or
    ``chain_id`` disagree with the deployed contract, and every signature
    built from it would be rejected on-chain.
    """
    on_chain = await query_domain_separator(w3, request.token_address)
    local = domain_separator(request)
    if on_chain != local:
        logger.warning(
            "domain separator mismatch for %s: on-chain 0x%s, local 0x%s",
            request.token_address, on_chain.hex(), local.hex(),
        )
        return False
    return True
