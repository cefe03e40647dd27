"""
Permit Encoding Helpers

Pure functions shared by the builder, the schemas and the verifiers:

hash_typed_data
    Split an EIP-712 payload into its domain separator, struct hash and the
    final digest that is actually signed.
normalize_signature
    Turn whatever a signing capability returned into a canonical
    ``(v, r, s)`` triple, or raise ``ValueError``.
recover_digest_signer
    ECDSA public-key recovery from a 32-byte digest.
encode_permit_data / encode_dai_permit_data
    ABI-encode the ``permit(...)`` call that the bridge forwards to the
    token as ``permitData``.
"""

from typing import Any, Dict, Tuple

from eth_abi import encode
from eth_account.messages import encode_typed_data
from eth_keys import keys
from eth_keys.exceptions import BadSignature, ValidationError
from eth_utils import decode_hex, keccak

from ..constants import DAI_PERMIT_SELECTOR, PERMIT_SELECTOR, SECP256K1_N


def hash_typed_data(typed_data: Dict[str, Any]) -> Tuple[bytes, bytes, bytes]:
    """
    Compute the EIP-712 hashes of a ``{types, primaryType, domain, message}`` payload.

    Args:
        typed_data: Full EIP-712 message dict.

    Returns:
        ``(domain_separator, struct_hash, digest)`` where
        ``digest = keccak256(0x19 0x01 || domain_separator || struct_hash)``.
    """
    signable = encode_typed_data(full_message=typed_data)
    digest = keccak(b"\x19" + signable.version + signable.header + signable.body)
    return bytes(signable.header), bytes(signable.body), digest


def _to_int(component: Any, name: str) -> int:
    if isinstance(component, bool):
        raise ValueError(f"signature component {name} must not be a bool")
    if isinstance(component, int):
        return component
    if isinstance(component, (bytes, bytearray)):
        return int.from_bytes(component, "big")
    if isinstance(component, str):
        return int(component, 16)
    raise ValueError(f"unsupported type for signature component {name}: {type(component).__name__}")


def normalize_signature(raw: Any) -> Tuple[int, int, int]:
    """
    Normalize a signer's output to ``(v, r, s)`` with ``v`` in {27, 28} and low ``s``.

    Accepted shapes:
        - 65 raw bytes or a 0x-hex string laid out as ``r || s || v``
        - an object exposing ``v``, ``r``, ``s`` (e.g. ``eth_account``'s ``SignedMessage``)
        - a ``(v, r, s)`` tuple or list

    A high-``s`` signature is folded into its low-``s`` twin (flipping ``v``);
    both recover to the same address but contracts built on OpenZeppelin's
    ECDSA library only accept the low form.

    Raises:
        ValueError: If the signature is malformed.
    """
    if all(hasattr(raw, attr) for attr in ("v", "r", "s")):
        v, r, s = (_to_int(getattr(raw, attr), attr) for attr in ("v", "r", "s"))
    elif isinstance(raw, (bytes, bytearray, str)):
        data = decode_hex(raw) if isinstance(raw, str) else bytes(raw)
        if len(data) != 65:
            raise ValueError(f"packed signature must be 65 bytes, got {len(data)}")
        r = int.from_bytes(data[:32], "big")
        s = int.from_bytes(data[32:64], "big")
        v = data[64]
    elif isinstance(raw, (tuple, list)) and len(raw) == 3:
        v, r, s = (_to_int(component, name) for component, name in zip(raw, ("v", "r", "s")))
    else:
        raise ValueError(f"unrecognised signature value of type {type(raw).__name__}")

    if v in (0, 1):
        v += 27
    if v not in (27, 28):
        raise ValueError(f"invalid recovery id v={v}")
    if not 0 < r < SECP256K1_N:
        raise ValueError("signature r is out of range")
    if not 0 < s < SECP256K1_N:
        raise ValueError("signature s is out of range")

    if s > SECP256K1_N // 2:
        s = SECP256K1_N - s
        v = 55 - v

    return v, r, s


def recover_digest_signer(digest: bytes, v: int, r: int, s: int) -> str:
    """
    Recover the checksum address that produced ``(v, r, s)`` over ``digest``.

    Args:
        digest: 32-byte hash that was signed.
        v:      Recovery id (27 or 28).
        r:      Signature r as integer.
        s:      Signature s as integer.

    Returns:
        Checksummed signer address.

    Raises:
        ValueError: If the digest or signature is malformed or recovery fails.
    """
    if len(digest) != 32:
        raise ValueError(f"digest must be 32 bytes, got {len(digest)}")
    if v not in (27, 28):
        raise ValueError(f"invalid recovery id v={v}")
    try:
        signature = keys.Signature(vrs=(v - 27, r, s))
        public_key = signature.recover_public_key_from_msg_hash(digest)
    except (BadSignature, ValidationError) as e:
        raise ValueError(f"signature recovery failed: {e}") from e
    return public_key.to_checksum_address()


def encode_permit_data(
    *,
    owner: str,
    spender: str,
    value: int,
    deadline: int,
    v: int,
    r: int,
    s: int,
) -> bytes:
    """
    ABI-encode an EIP-2612 ``permit(owner, spender, value, deadline, v, r, s)`` call.

    The result is the ``permitData`` argument of the bridge's ``bridgeAsset``.
    """
    return PERMIT_SELECTOR + encode(
        ["address", "address", "uint256", "uint256", "uint8", "bytes32", "bytes32"],
        [owner, spender, value, deadline, v, r.to_bytes(32, "big"), s.to_bytes(32, "big")],
    )


def encode_dai_permit_data(
    *,
    holder: str,
    spender: str,
    nonce: int,
    expiry: int,
    allowed: bool,
    v: int,
    r: int,
    s: int,
) -> bytes:
    """
    ABI-encode a DAI-style ``permit(holder, spender, nonce, expiry, allowed, v, r, s)`` call.
    """
    return DAI_PERMIT_SELECTOR + encode(
        ["address", "address", "uint256", "uint256", "bool", "uint8", "bytes32", "bytes32"],
        [holder, spender, nonce, expiry, allowed, v, r.to_bytes(32, "big"), s.to_bytes(32, "big")],
    )
