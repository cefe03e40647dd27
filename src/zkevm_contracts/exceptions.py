"""
Exception and Error Definitions Module

Defines the exception hierarchy for permit signing, contract artifact lookup
and read-only blockchain interactions. Every failure is scoped to a single
call; nothing here is meant to take down the host process.

Exception Hierarchy:
    ContractsError (root)
    ├── PermitError
    │   ├── InvalidInput
    │   ├── SigningFailure
    │   └── VerificationMismatch
    ├── ArtifactError
    │   ├── ArtifactNotFound
    │   └── ArtifactLoadError
    ├── ConfigurationError
    └── BlockchainInteractionError
"""

from typing import Optional


class ContractsError(Exception):
    """
    Root exception class for all project-specific exceptions.

    Catch this to handle every error raised by the package in one place.
    """
    pass


class PermitError(ContractsError):
    """
    Base exception for permit construction failures.

    The three subclasses are deliberately distinct so callers can apply a
    different retry policy per kind.
    """
    pass


class InvalidInput(PermitError, ValueError):
    """
    Raised when a permit request field is malformed or out of range.

    This includes scenarios such as:
    - Address that is not a 20-byte hex account identifier
    - Negative ``value`` / ``nonce`` / ``deadline``
    - Integer that does not fit in ``uint256``

    Recoverable by the caller correcting the input.

    Attributes:
        field: Name of the offending field, when known
    """

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class SigningFailure(PermitError):
    """
    Raised when the signing capability could not produce a signature.

    This includes scenarios such as:
    - The signer raised (hardware wallet rejected, remote service down)
    - The signer returned something that is not a valid (v, r, s) triple
    - The signing call was cancelled

    Attributes:
        reason: One of ``"error"``, ``"malformed"`` or ``"cancelled"``
    """

    def __init__(self, message: str, *, reason: str = "error"):
        super().__init__(message)
        self.reason = reason


class VerificationMismatch(PermitError):
    """
    Raised when a produced signature does not recover to the expected owner.

    Fatal for the call: the signature must never be handed back silently.

    Attributes:
        expected: Address the signature was supposed to come from
        recovered: Address actually recovered from the signature
    """

    def __init__(self, message: str, *, expected: Optional[str] = None, recovered: Optional[str] = None):
        super().__init__(message)
        self.expected = expected
        self.recovered = recovered


class ArtifactError(ContractsError):
    """
    Base exception for compiled contract artifact errors.
    """
    pass


class ArtifactNotFound(ArtifactError, KeyError):
    """
    Raised when no artifact is registered under the requested contract name.

    Attributes:
        name: The contract name that was looked up
    """

    def __init__(self, name: str, message: Optional[str] = None):
        super().__init__(message or f"No artifact registered for contract {name!r}")
        self.name = name

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0])


class ArtifactLoadError(ArtifactError):
    """
    Raised when an artifact file exists but cannot be parsed.

    This includes scenarios such as:
    - Invalid JSON
    - Missing ``abi`` or ``bytecode`` keys
    - Bytecode that is not 0x-prefixed hex
    """
    pass


class ConfigurationError(ContractsError):
    """
    Raised when configuration is missing or invalid.

    This includes scenarios such as:
    - Required environment variable not set
    - Artifacts directory does not exist
    """
    pass


class BlockchainInteractionError(ContractsError):
    """
    Raised when a read-only RPC call fails.

    This includes scenarios such as:
    - RPC call timeout
    - Network connectivity issues
    - Contract does not implement the queried view function

    Attributes:
        rpc_method: Contract function or RPC method that was called
    """

    def __init__(self, message: str, *, rpc_method: Optional[str] = None):
        super().__init__(message)
        self.rpc_method = rpc_method
