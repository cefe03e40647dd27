"""
Signing Capabilities

The permit builder never touches key material directly.  It asks a
``SigningCapability`` to sign a 32-byte digest and gets back a signature.
This keeps in-memory keys, hardware wallets and remote signing services
interchangeable.

Implementations
---------------
LocalAccountSigner
    In-process secp256k1 key held by ``eth_account``.
CallbackSigner
    Adapts any plain or ``async`` callable ``digest -> signature``; the usual
    way to plug in a remote signer or a hardware-wallet bridge.
"""

import inspect
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Optional, Union

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_utils import to_checksum_address

from ..constants import get_private_key_from_env
from ..exceptions import ConfigurationError


class SigningCapability(ABC):
    """
    Abstract signer over raw 32-byte digests.

    ``sign_digest`` may return any of the shapes accepted by
    ``encoding.normalize_signature``: 65 packed bytes (or their 0x-hex form),
    an object with ``v``, ``r``, ``s`` attributes, or a ``(v, r, s)`` tuple.

    Concurrency safety of a given signer (whether it can serve overlapping
    requests) is the implementation's own contract.
    """

    #: Address of the key behind this signer, when the implementation knows it.
    address: Optional[str] = None

    @abstractmethod
    async def sign_digest(self, digest: bytes) -> Any:
        """
        Sign ``digest`` without any additional prefixing.

        Args:
            digest: 32-byte EIP-712 digest.

        Returns:
            The signature in one of the accepted shapes.
        """
        pass


class LocalAccountSigner(SigningCapability):
    """
    Signer backed by an in-memory private key.

    Example::

        signer = LocalAccountSigner("0x" + "11" * 32)
        signature = await signer.sign_digest(digest)
    """

    def __init__(self, private_key: Union[str, bytes]):
        if not private_key:
            raise ValueError("Private key is required for signing.")
        self._account: LocalAccount = Account.from_key(private_key)
        self.address = self._account.address

    @classmethod
    def from_env(cls) -> "LocalAccountSigner":
        """
        Build a signer from ``ZKEVM_SIGNER_PRIVATE_KEY``.

        Raises:
            ConfigurationError: If the variable is not set.
        """
        private_key = get_private_key_from_env()
        if not private_key:
            raise ConfigurationError("ZKEVM_SIGNER_PRIVATE_KEY is not set")
        return cls(private_key)

    async def sign_digest(self, digest: bytes) -> Any:
        return self._account.unsafe_sign_hash(digest)

    def __repr__(self) -> str:
        return f"LocalAccountSigner(address={self.address!r})"


class CallbackSigner(SigningCapability):
    """
    Signer that delegates to a user-supplied callable.

    The callable receives the digest and may be synchronous or a coroutine
    function.

    Example::

        async def remote_sign(digest: bytes) -> str:
            resp = await client.post("/sign", json={"digest": digest.hex()})
            return resp.json()["signature"]

        signer = CallbackSigner(remote_sign, address="0x...")
    """

    def __init__(
        self,
        callback: Callable[[bytes], Union[Any, Awaitable[Any]]],
        *,
        address: Optional[str] = None,
    ):
        if not callable(callback):
            raise TypeError("callback must be callable")
        self._callback = callback
        self.address = to_checksum_address(address) if address else None

    async def sign_digest(self, digest: bytes) -> Any:
        result = self._callback(digest)
        if inspect.isawaitable(result):
            result = await result
        return result

    def __repr__(self) -> str:
        return f"CallbackSigner(address={self.address!r})"
