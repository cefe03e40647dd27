"""
Permit Schema Models

Pydantic models for the inputs and outputs of the permit builder.  All
classes inherit from ``schemas.bases.CanonicalModel``.

Request classes (frozen; a validation failure raises ``InvalidInput``):
    - PermitRequest: EIP-2612 ``Permit`` fields plus the token's domain fields.
    - DaiPermitRequest: DAI-style ``Permit`` (holder, nonce, expiry, allowed).

Signature classes:
    - EIP2612Signature: v/r/s components with packing helpers.
    - PermitSignature: Signature together with the digest, the intermediate
      hashes and the exact typed-data payload that was signed.
"""

from typing import Any, Dict, Literal, Optional, Tuple, Union

from eth_utils import is_address, is_checksum_address, to_checksum_address
from pydantic import ConfigDict, Field, ValidationError, field_validator

from ..constants import MAX_UINT256, TOKEN_WRAPPED_VERSION
from ..exceptions import InvalidInput
from ..schemas.bases import CanonicalModel
from .encoding import encode_dai_permit_data, encode_permit_data, recover_digest_signer
from .standards import (
    DaiPermitMessage,
    DaiPermitTypedData,
    EIP712Domain,
    PermitMessage,
    PermitTypedData,
)


def _invalid_input(exc: ValidationError) -> InvalidInput:
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error.get("loc", ())) or None
    return InvalidInput(f"{field}: {error.get('msg')}" if field else str(exc), field=field)


def _check_address(value: Any) -> str:
    if not isinstance(value, str) or not is_address(value):
        raise ValueError(f"not a well-formed account address: {value!r}")
    body = value[2:] if value[:2].lower() == "0x" else value
    # Mixed case means EIP-55; an all-lower or all-upper address carries no checksum
    if body != body.lower() and body != body.upper() and not is_checksum_address(value):
        raise ValueError(f"address has an invalid EIP-55 checksum: {value!r}")
    return to_checksum_address(value)


def _check_uint256(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"expected an integer, got {type(value).__name__}")
    if value < 0:
        raise ValueError("must be non-negative")
    if value > MAX_UINT256:
        raise ValueError("does not fit in uint256")
    return value


class _DomainRequest(CanonicalModel):
    """Fields shared by every permit flavour: the token's EIP-712 domain."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    token_address: str = Field(..., alias="tokenAddress", description="Permit-capable token contract (verifyingContract)")
    chain_id: int = Field(..., alias="chainId", description="Chain the signature is valid on")
    token_name: str = Field(..., alias="tokenName", description="EIP-712 domain name")
    token_version: Optional[str] = Field(
        default=TOKEN_WRAPPED_VERSION,
        alias="tokenVersion",
        description="EIP-712 domain version; None for domains without a version field",
    )

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise _invalid_input(exc) from exc

    @field_validator("token_address", mode="before")
    @classmethod
    def _validate_token_address(cls, value: Any) -> str:
        return _check_address(value)

    @field_validator("chain_id", mode="before")
    @classmethod
    def _validate_chain_id(cls, value: Any) -> int:
        value = _check_uint256(value)
        if value < 1:
            raise ValueError("chain_id must be a positive integer")
        return value

    def revalidated(self):
        """
        Run validation again on this instance's data.

        Instances built with ``model_construct`` skip validation; the builder
        calls this before signing.

        Raises:
            InvalidInput: If any field fails validation.
        """
        try:
            return type(self).model_validate(self.model_dump())
        except ValidationError as exc:
            raise _invalid_input(exc) from exc

    def domain(self) -> EIP712Domain:
        return EIP712Domain(
            name=self.token_name,
            version=self.token_version,
            chainId=self.chain_id,
            verifyingContract=self.token_address,
        )


class PermitRequest(_DomainRequest):
    """
    EIP-2612 permit request.

    Attributes:
        token_address: Token contract address (alias ``tokenAddress``).
        chain_id: EVM network ID (alias ``chainId``), e.g. 1101 for Polygon zkEVM.
        owner: Token holder granting the allowance.
        spender: Address allowed to move the tokens (the bridge, for deposits).
        value: Allowance in the token's smallest unit, ``0..2**256-1``.
        nonce: Owner's current ``nonces(owner)`` value on the token.
        deadline: Unix timestamp after which the permit is rejected on-chain.
            Past values are accepted here; freshness is enforced at redemption.
        token_name: EIP-712 domain ``name`` (alias ``tokenName``).
        token_version: EIP-712 domain ``version`` (alias ``tokenVersion``).

    Example::

        request = PermitRequest(
            tokenAddress="0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",
            chainId=1101,
            owner="0x1111111111111111111111111111111111111111",
            spender="0x2a3DD3EB832aF982ec71669E178424b10Dca2EDe",
            value=10**18,
            nonce=0,
            deadline=1_900_000_000,
            tokenName="TokenWrapped",
            tokenVersion="1",
        )
    """

    permit_type: Literal["EIP2612"] = Field(default="EIP2612", description="Permit standard identifier")
    owner: str = Field(..., description="Token owner address")
    spender: str = Field(..., description="Authorized spender address")
    value: int = Field(..., description="Approved amount (uint256)")
    nonce: int = Field(..., description="Owner's current permit nonce (uint256)")
    deadline: int = Field(..., description="Unix timestamp after which the permit is invalid (uint256)")

    @field_validator("owner", "spender", mode="before")
    @classmethod
    def _validate_accounts(cls, value: Any) -> str:
        return _check_address(value)

    @field_validator("value", "nonce", "deadline", mode="before")
    @classmethod
    def _validate_uints(cls, value: Any) -> int:
        return _check_uint256(value)

    @property
    def signer_address(self) -> str:
        return self.owner

    def message(self) -> PermitMessage:
        return PermitMessage(
            owner=self.owner,
            spender=self.spender,
            value=self.value,
            nonce=self.nonce,
            deadline=self.deadline,
        )

    def typed_data(self) -> PermitTypedData:
        return PermitTypedData(domain=self.domain(), message=self.message())


class DaiPermitRequest(_DomainRequest):
    """
    DAI-style permit request.

    ``allowed=True`` grants an unlimited allowance, ``False`` revokes it.
    ``expiry=0`` means the permit never expires.
    """

    permit_type: Literal["DAI"] = Field(default="DAI", description="Permit standard identifier")
    holder: str = Field(..., description="Token holder address")
    spender: str = Field(..., description="Authorized spender address")
    nonce: int = Field(..., description="Holder's current permit nonce (uint256)")
    expiry: int = Field(..., description="Unix timestamp after which the permit is invalid; 0 = never")
    allowed: bool = Field(default=True, description="Grant (True) or revoke (False) the allowance")

    @field_validator("holder", "spender", mode="before")
    @classmethod
    def _validate_accounts(cls, value: Any) -> str:
        return _check_address(value)

    @field_validator("nonce", "expiry", mode="before")
    @classmethod
    def _validate_uints(cls, value: Any) -> int:
        return _check_uint256(value)

    @field_validator("allowed", mode="before")
    @classmethod
    def _validate_allowed(cls, value: Any) -> bool:
        if not isinstance(value, bool):
            raise ValueError(f"allowed must be a bool, got {type(value).__name__}")
        return value

    @property
    def signer_address(self) -> str:
        return self.holder

    def message(self) -> DaiPermitMessage:
        return DaiPermitMessage(
            holder=self.holder,
            spender=self.spender,
            nonce=self.nonce,
            expiry=self.expiry,
            allowed=self.allowed,
        )

    def typed_data(self) -> DaiPermitTypedData:
        return DaiPermitTypedData(domain=self.domain(), message=self.message())


class EIP2612Signature(CanonicalModel):
    """
    ECDSA signature components (v, r, s) of a permit.

    Attributes:
        v: ECDSA recovery ID (27 or 28).
        r: r component, 0x-prefixed 64-char hex string.
        s: s component, 0x-prefixed 64-char hex string.

    Example::

        sig = EIP2612Signature(v=27, r="0x" + "a" * 64, s="0x" + "b" * 64)
        sig.to_packed_hex()
    """

    model_config = ConfigDict(frozen=True)

    v: int = Field(..., ge=27, le=28, description="ECDSA recovery ID (27 or 28)")
    r: str = Field(..., description="Signature r component (32 bytes, 0x-prefixed hex)")
    s: str = Field(..., description="Signature s component (32 bytes, 0x-prefixed hex)")

    @classmethod
    def from_vrs(cls, v: int, r: int, s: int) -> "EIP2612Signature":
        return cls(v=v, r="0x" + r.to_bytes(32, "big").hex(), s="0x" + s.to_bytes(32, "big").hex())

    def validate_format(self) -> bool:
        """
        Validate v/r/s components.

        Returns:
            True when all components pass.

        Raises:
            ValueError: Descriptive message on the first failed check.
        """
        if self.v not in (27, 28):
            raise ValueError(f"Invalid recovery ID: {self.v}. Must be 27 or 28")

        for name, val in [("r", self.r), ("s", self.s)]:
            hex_str = val[2:] if val[:2].lower() == "0x" else val
            if len(hex_str) != 64:
                raise ValueError(f"Invalid {name}: expected 64 hex chars, got {len(hex_str)}")
            try:
                int(hex_str, 16)
            except ValueError:
                raise ValueError(f"Invalid {name}: not valid hexadecimal")

        return True

    def vrs(self) -> Tuple[int, int, int]:
        """Return ``(v, r, s)`` with r and s as integers."""
        return self.v, int(self.r, 16), int(self.s, 16)

    def to_packed_hex(self) -> str:
        """
        Encode v/r/s into a packed 65-byte hex string (``r || s || v``).

        Returns:
            0x-prefixed 132-character hex string.
        """
        self.validate_format()
        _, r, s = self.vrs()
        return "0x" + format(r, "064x") + format(s, "064x") + format(self.v, "02x")


class PermitSignature(CanonicalModel):
    """
    Result of signing a permit.

    Keeps everything a caller needs to re-verify locally before submission:
    the exact typed-data payload, the domain separator, the struct hash and
    the final digest.

    Attributes:
        request: The request that was signed.
        signature: The (v, r, s) components.
        digest: ``keccak256(0x1901 || domain_separator || struct_hash)``, 0x-hex.
        domain_separator: EIP-712 domain hash, 0x-hex.
        struct_hash: EIP-712 ``hashStruct(message)``, 0x-hex.
        typed_data: ``{types, primaryType, domain, message}`` payload.
    """

    model_config = ConfigDict(frozen=True)

    request: Union[PermitRequest, DaiPermitRequest] = Field(..., discriminator="permit_type")
    signature: EIP2612Signature
    digest: str
    domain_separator: str
    struct_hash: str
    typed_data: Dict[str, Any]

    @property
    def owner(self) -> str:
        return self.request.signer_address

    def recover_signer(self) -> str:
        """
        Recover the address that produced ``signature`` over ``digest``.

        Raises:
            ValueError: If recovery fails.
        """
        v, r, s = self.signature.vrs()
        return recover_digest_signer(bytes.fromhex(self.digest[2:]), v, r, s)

    def to_permit_data(self) -> str:
        """
        Encode the signed permit as the bridge's ``permitData`` argument.

        Returns:
            0x-prefixed calldata of the token's ``permit(...)`` call.
        """
        v, r, s = self.signature.vrs()
        request = self.request
        if isinstance(request, DaiPermitRequest):
            data = encode_dai_permit_data(
                holder=request.holder,
                spender=request.spender,
                nonce=request.nonce,
                expiry=request.expiry,
                allowed=request.allowed,
                v=v, r=r, s=s,
            )
        else:
            data = encode_permit_data(
                owner=request.owner,
                spender=request.spender,
                value=request.value,
                deadline=request.deadline,
                v=v, r=r, s=s,
            )
        return "0x" + data.hex()
