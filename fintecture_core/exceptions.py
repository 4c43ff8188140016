"""
Signing Exceptions
==================
Exception classes raised by the signing and verification paths.
"""

from typing import Optional, Any


class FintectureError(Exception):
    """Base exception for all signing and verification errors."""

    code = "fintecture_error"

    def __init__(self, message: str, details: Any = None, code: Optional[str] = None):
        self.message = message
        self.details = details
        if code:
            self.code = code
        super().__init__(message)


class ConfigError(FintectureError):
    """Raised when key material or configuration is missing or invalid."""
    code = "config_error"


class UnsupportedAlgorithmError(FintectureError):
    """Raised when a signature algorithm other than rsa-sha256 is requested."""
    code = "unsupported_algorithm"


class SigningError(FintectureError):
    """Raised when the underlying signing primitive fails."""
    code = "signing_error"


class DecryptionError(FintectureError):
    """Raised when an RSA private-key decryption fails."""
    code = "decryption_error"


class AuthenticationError(FintectureError):
    """Base class for inbound verification failures (401)."""
    code = "authentication_failed"


class MalformedSignatureError(AuthenticationError):
    """Raised when the Signature header is missing or cannot be parsed."""
    code = "malformed_signature"


class DigestMismatchError(AuthenticationError):
    """Raised when the Digest header does not match the request body."""
    code = "digest_mismatch"


class SignatureMismatchError(AuthenticationError):
    """Raised when the signature does not match the canonical string."""
    code = "signature_mismatch"
