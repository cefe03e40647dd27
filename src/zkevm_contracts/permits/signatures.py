"""
Permit Signature Builder

Builds off-chain permit authorizations that a relayer or the bridge can
later redeem on-chain without a prior ``approve`` transaction.

The builder is a pure function of its request plus the signing capability
and keeps no state between calls.  It may suspend while awaiting the signer
but has no concurrency of its own, so independent calls can run in parallel.

Exported helpers
----------------
build_permit_typed_data
    EIP-712 envelope for a request without signing, for wallets that sign
    typed data themselves (``eth_signTypedData_v4``).
build_permit
    Sign an EIP-2612 ``Permit`` and return a ``PermitSignature``.
build_dai_permit
    Same for the DAI-style ``Permit(holder,spender,nonce,expiry,allowed)``.
"""

import asyncio
import logging
from typing import Any, Dict, Union

from ..exceptions import InvalidInput, SigningFailure, VerificationMismatch
from .encoding import hash_typed_data, normalize_signature, recover_digest_signer
from .schemas import DaiPermitRequest, EIP2612Signature, PermitRequest, PermitSignature
from .signers import SigningCapability

logger = logging.getLogger(__name__)


def build_permit_typed_data(request: Union[PermitRequest, DaiPermitRequest]) -> Dict[str, Any]:
    """
    Return the EIP-712 payload for ``request`` without signing it.

    Args:
        request: A permit request of either flavour.

    Returns:
        ``{types, primaryType, domain, message}`` dict compatible with
        ``eth_account.messages.encode_typed_data`` and ``eth_signTypedData_v4``.

    Example::

        payload = build_permit_typed_data(request)
        # hand off to a browser wallet
    """
    return request.typed_data().to_dict()


async def _invoke_signer(signer: SigningCapability, digest: bytes):
    try:
        raw = await signer.sign_digest(digest)
    except asyncio.CancelledError as e:
        # The caller's own task is being cancelled (task.cancel(), wait_for timeout)
        task = asyncio.current_task()
        if task is not None and task.cancelling():
            raise
        raise SigningFailure("Signing was cancelled before a signature was produced", reason="cancelled") from e
    except Exception as e:
        raise SigningFailure(f"Signer {signer!r} failed: {e}", reason="error") from e

    try:
        return normalize_signature(raw)
    except ValueError as e:
        raise SigningFailure(f"Signer {signer!r} returned a malformed signature: {e}", reason="malformed") from e


async def _sign_request(
    request: Union[PermitRequest, DaiPermitRequest],
    signer: SigningCapability,
    *,
    self_check: bool,
) -> PermitSignature:
    if not isinstance(signer, SigningCapability):
        raise TypeError(f"signer must be a SigningCapability, got {type(signer).__name__}")

    request = request.revalidated()
    typed_data = build_permit_typed_data(request)
    try:
        domain_separator, struct_hash, digest = hash_typed_data(typed_data)
    except (TypeError, ValueError) as e:
        raise InvalidInput(f"Request cannot be encoded as EIP-712 typed data: {e}") from e

    v, r, s = await _invoke_signer(signer, digest)

    if self_check:
        expected = request.signer_address
        try:
            recovered = recover_digest_signer(digest, v, r, s)
        except ValueError as e:
            raise VerificationMismatch(
                f"Signature does not recover to {expected}: {e}", expected=expected
            ) from e
        if recovered != expected:
            logger.warning(
                "permit self-check failed: expected signer %s, recovered %s (token=%s chain_id=%s)",
                expected, recovered, request.token_address, request.chain_id,
            )
            raise VerificationMismatch(
                f"Signature recovers to {recovered}, expected {expected}",
                expected=expected,
                recovered=recovered,
            )

    logger.debug(
        "built %s permit for %s on token %s (chain_id=%s)",
        request.permit_type, request.signer_address, request.token_address, request.chain_id,
    )

    return PermitSignature(
        request=request,
        signature=EIP2612Signature.from_vrs(v, r, s),
        digest="0x" + digest.hex(),
        domain_separator="0x" + domain_separator.hex(),
        struct_hash="0x" + struct_hash.hex(),
        typed_data=typed_data,
    )


async def build_permit(
    request: PermitRequest,
    signer: SigningCapability,
    *,
    self_check: bool = True,
) -> PermitSignature:
    """
    Sign an EIP-2612 ``Permit`` and return the signature with its signed payload.

    Steps:
        1. Domain ``EIP712Domain(name, version, chainId, verifyingContract)``
           from the request's token fields.
        2. Message ``Permit(owner, spender, value, nonce, deadline)`` in the
           canonical field order the token contract recomputes.
        3. ``digest = keccak256(0x1901 || domainSeparator || hashStruct(message))``.
        4. ``signer.sign_digest(digest)`` -> ``(v, r, s)``.
        5. Optionally recover the signer and compare with ``owner``.

    Args:
        request:    Validated ``PermitRequest``.
        signer:     Any ``SigningCapability``.
        self_check: Recover the signature locally and fail fast if it does
                    not resolve to ``request.owner``.  Disable only when the
                    signing key is intentionally not the owner's (tests).

    Returns:
        ``PermitSignature``; ``.to_permit_data()`` gives the bridge's
        ``permitData`` argument.

    Raises:
        InvalidInput: A request field fails validation.
        SigningFailure: The signer raised, was cancelled, or returned a
            malformed signature.
        VerificationMismatch: ``self_check`` is on and the signature does not
            recover to ``owner``.

    Example::

        signer = LocalAccountSigner(private_key)
        permit = await build_permit(request, signer)
        permit_data = permit.to_permit_data()
    """
    if not isinstance(request, PermitRequest):
        raise InvalidInput(f"expected a PermitRequest, got {type(request).__name__}")
    return await _sign_request(request, signer, self_check=self_check)


async def build_dai_permit(
    request: DaiPermitRequest,
    signer: SigningCapability,
    *,
    self_check: bool = True,
) -> PermitSignature:
    """
    Sign a DAI-style ``Permit(holder, spender, nonce, expiry, allowed)``.

    Same contract as ``build_permit``; the self-check compares against
    ``request.holder``.
    """
    if not isinstance(request, DaiPermitRequest):
        raise InvalidInput(f"expected a DaiPermitRequest, got {type(request).__name__}")
    return await _sign_request(request, signer, self_check=self_check)


def permit_struct_hash(request: PermitRequest) -> bytes:
    """
    ``hashStruct`` of the request's ``Permit`` message.

    Equal to ``keccak256(abi.encode(PERMIT_TYPEHASH, owner, spender, value, nonce, deadline))``.
    """
    _, struct_hash, _ = hash_typed_data(build_permit_typed_data(request))
    return struct_hash


def permit_digest(request: PermitRequest) -> bytes:
    """Final 32-byte digest a signer must sign for ``request``."""
    _, _, digest = hash_typed_data(build_permit_typed_data(request))
    return digest


def domain_separator(request: Union[PermitRequest, DaiPermitRequest]) -> bytes:
    """
    EIP-712 domain separator the token contract should report from
    ``DOMAIN_SEPARATOR()`` for this request's domain fields.
    """
    domain_hash, _, _ = hash_typed_data(build_permit_typed_data(request))
    return domain_hash
