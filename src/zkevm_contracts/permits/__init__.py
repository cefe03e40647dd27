from .schemas import (
    PermitRequest,
    DaiPermitRequest,
    EIP2612Signature,
    PermitSignature,
)
from .signers import (
    SigningCapability,
    LocalAccountSigner,
    CallbackSigner,
)
from .signatures import (
    build_permit,
    build_dai_permit,
    build_permit_typed_data,
    permit_digest,
    permit_struct_hash,
    domain_separator,
)
from .encoding import (
    encode_permit_data,
    encode_dai_permit_data,
    recover_digest_signer,
)
from .verifies import verify_permit
from .chain import (
    query_token_metadata,
    query_permit_nonce,
    query_domain_separator,
    fetch_permit_request,
    check_domain_separator,
    web3_from_env,
)

__all__ = [
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
    "permit_digest",
    "permit_struct_hash",
    "domain_separator",
    "encode_permit_data",
    "encode_dai_permit_data",
    "recover_digest_signer",
    "verify_permit",
    "query_token_metadata",
    "query_permit_nonce",
    "query_domain_separator",
    "fetch_permit_request",
    "check_domain_separator",
    "web3_from_env",
]
