from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional


# -----------------------------
# EIP-712 Domain
# -----------------------------

@dataclass(frozen=True)
class EIP712Domain:
    """
    EIP-712 domain separator.
    Used to prevent signature replay across contracts and chains.

    ``version`` is optional: tokens that follow the Uniswap convention
    declare ``EIP712Domain(string name,uint256 chainId,address verifyingContract)``
    and the field must then be left out of both the type and the values.
    """
    name: str
    chainId: int
    verifyingContract: str
    version: Optional[str] = None

    def type_fields(self) -> List[Dict[str, str]]:
        fields = [{"name": "name", "type": "string"}]
        if self.version is not None:
            fields.append({"name": "version", "type": "string"})
        fields.append({"name": "chainId", "type": "uint256"})
        fields.append({"name": "verifyingContract", "type": "address"})
        return fields

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name}
        if self.version is not None:
            data["version"] = self.version
        data["chainId"] = self.chainId
        data["verifyingContract"] = self.verifyingContract
        return data


# -----------------------------
# Permit Message (EIP-2612)
# -----------------------------

#: Canonical EIP-2612 field order. The on-chain contract hashes the struct in
#: exactly this order; any other order yields a different digest.
PERMIT_FIELDS: List[Dict[str, str]] = [
    {"name": "owner", "type": "address"},
    {"name": "spender", "type": "address"},
    {"name": "value", "type": "uint256"},
    {"name": "nonce", "type": "uint256"},
    {"name": "deadline", "type": "uint256"},
]

DAI_PERMIT_FIELDS: List[Dict[str, str]] = [
    {"name": "holder", "type": "address"},
    {"name": "spender", "type": "address"},
    {"name": "nonce", "type": "uint256"},
    {"name": "expiry", "type": "uint256"},
    {"name": "allowed", "type": "bool"},
]


@dataclass(frozen=True)
class PermitMessage:
    """
    Permit message as defined in EIP-2612.
    Represents a token allowance authorization.
    """
    owner: str
    spender: str
    value: int
    nonce: int
    deadline: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "owner": self.owner,
            "spender": self.spender,
            "value": self.value,
            "nonce": self.nonce,
            "deadline": self.deadline,
        }


@dataclass(frozen=True)
class DaiPermitMessage:
    """
    DAI-style permit message.

    Grants (``allowed=True``) or revokes (``allowed=False``) an unlimited
    allowance; there is no ``value`` field and ``expiry=0`` means no expiry.
    """
    holder: str
    spender: str
    nonce: int
    expiry: int
    allowed: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "holder": self.holder,
            "spender": self.spender,
            "nonce": self.nonce,
            "expiry": self.expiry,
            "allowed": self.allowed,
        }


# -----------------------------
# EIP-712 Typed Data Wrappers
# -----------------------------

@dataclass
class PermitTypedData:
    """
    EIP-712 typed-data container for an EIP-2612 ``Permit``.

    ``to_dict()`` produces the ``{types, primaryType, domain, message}``
    layout accepted by ``eth_account.messages.encode_typed_data`` and by
    ``eth_signTypedData_v4`` wallets.

    Attributes:
        domain: EIP712Domain instance describing the signing domain.
        message: PermitMessage carrying the payload.
        permit_fields: Struct definition; only overridden to build
            deliberately non-canonical payloads.
    """
    domain: EIP712Domain
    message: PermitMessage

    primary_type: str = "Permit"

    permit_fields: List[Dict[str, str]] = field(
        default_factory=lambda: [dict(f) for f in PERMIT_FIELDS]
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "types": {
                "EIP712Domain": self.domain.type_fields(),
                self.primary_type: self.permit_fields,
            },
            "primaryType": self.primary_type,
            "domain": self.domain.to_dict(),
            "message": self.message.to_dict(),
        }


@dataclass
class DaiPermitTypedData:
    """
    EIP-712 typed-data container for a DAI-style ``Permit``.

    Same layout as ``PermitTypedData`` with the DAI struct definition.
    """
    domain: EIP712Domain
    message: DaiPermitMessage

    primary_type: str = "Permit"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "types": {
                "EIP712Domain": self.domain.type_fields(),
                self.primary_type: [dict(f) for f in DAI_PERMIT_FIELDS],
            },
            "primaryType": self.primary_type,
            "domain": self.domain.to_dict(),
            "message": self.message.to_dict(),
        }


# -----------------------------
# ERC-1271: Contract-based signature validation
# -----------------------------

@dataclass
class ERC1271ABI:
    """
    ABI definition for the ERC-1271 ``isValidSignature`` function.

    ``isValidSignature(bytes32 _hash, bytes _signature) returns (bytes4)``
    """

    def to_dict(self) -> Dict[str, Any]:
        """Return the ``isValidSignature`` ABI entry as a dict."""
        return {
            "inputs": [
                {"name": "_hash", "type": "bytes32"},
                {"name": "_signature", "type": "bytes"},
            ],
            "name": "isValidSignature",
            "outputs": [{"name": "", "type": "bytes4"}],
            "stateMutability": "view",
            "type": "function",
        }

    def to_list(self) -> List[Dict[str, Any]]:
        """Return the full ABI as a list compatible with ``web3.eth.contract``."""
        return [self.to_dict()]
