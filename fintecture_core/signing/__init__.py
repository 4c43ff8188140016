"""
Signing Module
==============
HTTP-Signature style request signing and webhook verification.
"""

# Re-export all public APIs
from .models import (
    DEFAULT_ALGORITHM,
    HeaderSet,
    ParsedSignature,
    ParseFailureReason,
    SignatureAlgorithm,
    SignatureComponents,
    SignatureParseFailure,
    SignatureParseResult,
)
from .canonical import REQUEST_TARGET, canonicalize, signed_header_names
from .crypto import (
    DIGEST_PREFIX,
    decrypt_private,
    digest_header_value,
    load_private_key,
    load_public_key,
    oaep_padding,
    pkcs1v15_padding,
    rsa_decrypt,
    rsa_encrypt,
    sha256_base64,
)
from .signer import (
    CONNECT_HEADER_PARAMETER_LIST,
    SIGNED_HEADER_PARAMETER_LIST,
    build_signature_header,
    build_webhook_signature_header,
    connect_signature,
    format_signature_header,
    sign,
)
from .verifier import (
    SignatureVerifier,
    authenticate,
    check_digest,
    compute_body_digest,
    extract_signature_components,
    parse_signature_header,
    serialize_form_body,
)

__all__ = [
    # Models
    "DEFAULT_ALGORITHM",
    "HeaderSet",
    "ParsedSignature",
    "ParseFailureReason",
    "SignatureAlgorithm",
    "SignatureComponents",
    "SignatureParseFailure",
    "SignatureParseResult",
    # Canonical string
    "REQUEST_TARGET",
    "canonicalize",
    "signed_header_names",
    # Crypto
    "DIGEST_PREFIX",
    "decrypt_private",
    "digest_header_value",
    "load_private_key",
    "load_public_key",
    "oaep_padding",
    "pkcs1v15_padding",
    "rsa_decrypt",
    "rsa_encrypt",
    "sha256_base64",
    # Signer
    "CONNECT_HEADER_PARAMETER_LIST",
    "SIGNED_HEADER_PARAMETER_LIST",
    "build_signature_header",
    "build_webhook_signature_header",
    "connect_signature",
    "format_signature_header",
    "sign",
    # Verifier
    "SignatureVerifier",
    "authenticate",
    "check_digest",
    "compute_body_digest",
    "extract_signature_components",
    "parse_signature_header",
    "serialize_form_body",
]
