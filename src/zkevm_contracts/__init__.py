"""
Polygon zkEVM contract artifacts and the EIP-2612 permit helper.
"""

from .artifacts import ArtifactRegistry, ContractArtifact, load_default_registry
from .exceptions import (
    ContractsError,
    PermitError,
    InvalidInput,
    SigningFailure,
    VerificationMismatch,
    ArtifactError,
    ArtifactNotFound,
    ArtifactLoadError,
    ConfigurationError,
    BlockchainInteractionError,
)
from .permits import (
    PermitRequest,
    DaiPermitRequest,
    EIP2612Signature,
    PermitSignature,
    SigningCapability,
    LocalAccountSigner,
    CallbackSigner,
    build_permit,
    build_dai_permit,
    build_permit_typed_data,
    verify_permit,
    fetch_permit_request,
)

__version__ = "0.1.0"

__all__ = [
    "ArtifactRegistry",
    "ContractArtifact",
    "load_default_registry",
    "ContractsError",
    "PermitError",
    "InvalidInput",
    "SigningFailure",
    "VerificationMismatch",
    "ArtifactError",
    "ArtifactNotFound",
    "ArtifactLoadError",
    "ConfigurationError",
    "BlockchainInteractionError",
    "PermitRequest",
    "DaiPermitRequest",
    "EIP2612Signature",
    "PermitSignature",
    "SigningCapability",
    "LocalAccountSigner",
    "CallbackSigner",
    "build_permit",
    "build_dai_permit",
    "build_permit_typed_data",
    "verify_permit",
    "fetch_permit_request",
]
