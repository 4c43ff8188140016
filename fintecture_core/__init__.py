"""
Fintecture Core Library
=======================
Request signing and webhook verification for Fintecture API clients.
"""

__version__ = "0.1.0"

# Configuration
from fintecture_core.config import (
    FintectureConfig,
    SANDBOX_ENVIRONMENT,
    PRODUCTION_ENVIRONMENT,
)

# Exceptions
from fintecture_core.exceptions import (
    FintectureError,
    ConfigError,
    UnsupportedAlgorithmError,
    SigningError,
    DecryptionError,
    AuthenticationError,
    MalformedSignatureError,
    DigestMismatchError,
    SignatureMismatchError,
)

# Signing
from fintecture_core.signing import (
    HeaderSet,
    SignatureAlgorithm,
    SignatureComponents,
    SignatureVerifier,
    authenticate,
    build_signature_header,
    canonicalize,
    connect_signature,
    decrypt_private,
    sha256_base64,
    sign,
)

# Headers
from fintecture_core.headers import get_headers, generate_uuid, generate_uuid_v4

__all__ = [
    "__version__",
    # Configuration
    "FintectureConfig",
    "SANDBOX_ENVIRONMENT",
    "PRODUCTION_ENVIRONMENT",
    # Exceptions
    "FintectureError",
    "ConfigError",
    "UnsupportedAlgorithmError",
    "SigningError",
    "DecryptionError",
    "AuthenticationError",
    "MalformedSignatureError",
    "DigestMismatchError",
    "SignatureMismatchError",
    # Signing
    "HeaderSet",
    "SignatureAlgorithm",
    "SignatureComponents",
    "SignatureVerifier",
    "authenticate",
    "build_signature_header",
    "canonicalize",
    "connect_signature",
    "decrypt_private",
    "sha256_base64",
    "sign",
    # Headers
    "get_headers",
    "generate_uuid",
    "generate_uuid_v4",
]
