"""
Permit Signature Verification Helpers

Off-chain checks a caller can run on a ``PermitSignature`` before handing
it to a relayer or embedding it in a bridge deposit.

The digest is always recomputed from the request rather than trusted from
the ``PermitSignature`` itself, so a tampered payload is caught.  EOA
recovery is tried first; when a Web3 provider is supplied and recovery does
not match, an ERC-1271 ``isValidSignature`` call lets smart-contract wallets
verify as well.
"""

import logging
from typing import Optional

from web3 import AsyncWeb3

from ..constants import ERC1271_MAGIC_VALUE
from .encoding import hash_typed_data, recover_digest_signer
from .schemas import PermitSignature
from .signatures import build_permit_typed_data
from .standards import ERC1271ABI

logger = logging.getLogger(__name__)


async def _is_valid_erc1271_signature(
    w3: AsyncWeb3,
    *,
    wallet: str,
    digest: bytes,
    packed_signature: bytes,
) -> bool:
    contract = w3.eth.contract(address=wallet, abi=ERC1271ABI().to_list())
    try:
        result = await contract.functions.isValidSignature(digest, packed_signature).call()
    except Exception as e:
        logger.debug("ERC-1271 check on %s failed: %s", wallet, e)
        return False
    return bytes(result) == ERC1271_MAGIC_VALUE


async def verify_permit(
    permit: PermitSignature,
    *,
    w3: Optional[AsyncWeb3] = None,
) -> bool:
    """
    Check that ``permit.signature`` was produced by the permit's owner.

    Args:
        permit: Output of ``build_permit`` / ``build_dai_permit`` (or one
                rebuilt from transport).
        w3:     Optional ``AsyncWeb3`` used for the ERC-1271 fallback.  When
                ``None`` only EOA recovery is attempted.

    Returns:
        ``True`` if the signature is valid for the owner, ``False`` otherwise.
        The stored ``digest`` must also match the recomputed one.
    """
    try:
        _, _, digest = hash_typed_data(build_permit_typed_data(permit.request))
    except (TypeError, ValueError) as e:
        logger.debug("permit payload could not be re-encoded: %s", e)
        return False

    if "0x" + digest.hex() != permit.digest.lower():
        logger.debug("stored digest %s does not match recomputed digest", permit.digest)
        return False

    owner = permit.owner
    v, r, s = permit.signature.vrs()
    try:
        if recover_digest_signer(digest, v, r, s) == owner:
            return True
    except ValueError as e:
        logger.debug("EOA recovery failed: %s", e)

    if w3 is not None:
        packed = bytes.fromhex(permit.signature.to_packed_hex()[2:])
        return await _is_valid_erc1271_signature(
            w3, wallet=owner, digest=digest, packed_signature=packed
        )

    return False
