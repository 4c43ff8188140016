"""
Inbound Verifier
================
Authenticates webhook requests signed with the HTTP-Signature style scheme.

Steps (each failure is terminal):
    1. Parse the Signature header into its four components
    2. Check the Digest header against the SHA-256 of the form-encoded body
    3. Rebuild the canonical string in the order the signature declares
    4. Decrypt the signature with the configured private key and compare
"""

import base64
import hmac
import string
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import parse_qsl, quote_plus

import structlog
from cryptography.hazmat.primitives.asymmetric import padding as asym_padding
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from ..config import FintectureConfig
from ..exceptions import (
    ConfigError,
    DecryptionError,
    DigestMismatchError,
    MalformedSignatureError,
    SignatureMismatchError,
)
from .canonical import canonicalize
from .crypto import DIGEST_PREFIX, load_private_key, pkcs1v15_padding, rsa_decrypt, sha256_base64
from .models import (
    HeaderSet,
    ParsedSignature,
    ParseFailureReason,
    SignatureComponents,
    SignatureParseFailure,
    SignatureParseResult,
)

logger = structlog.get_logger(__name__)

SIGNATURE_HEADER = "Signature"
DIGEST_HEADER = "Digest"

# Component name (lowercased) -> SignatureComponents field
REQUIRED_COMPONENTS: Dict[str, str] = {
    "keyid": "key_id",
    "algorithm": "algorithm",
    "headers": "headers",
    "signature": "signature",
}

_NAME_CHARS = frozenset(string.ascii_letters + string.digits + "-_")
_SEPARATORS = frozenset(" \t\r\n,")

Body = Union[Mapping[str, Any], Sequence[Tuple[str, Any]], str, bytes, None]


# =============================================================================
# Signature header parsing
# =============================================================================

def _tokenize_components(value: str) -> List[Tuple[str, str]]:
    """
    Split ``name="value"`` pairs separated by commas or whitespace.

    Raises:
        ValueError: On any syntax error, with the offending position
    """
    pairs = []
    pos = 0
    length = len(value)

    while True:
        while pos < length and value[pos] in _SEPARATORS:
            pos += 1
        if pos >= length:
            return pairs

        start = pos
        while pos < length and value[pos] in _NAME_CHARS:
            pos += 1
        if pos == start:
            raise ValueError(f"expected component name at position {pos}")
        name = value[start:pos]

        while pos < length and value[pos] in " \t":
            pos += 1
        if pos >= length or value[pos] != "=":
            raise ValueError(f"expected '=' after {name!r} at position {pos}")
        pos += 1
        while pos < length and value[pos] in " \t":
            pos += 1
        if pos >= length or value[pos] != '"':
            raise ValueError(f"expected '\"' for {name!r} at position {pos}")
        pos += 1

        end = value.find('"', pos)
        if end == -1:
            raise ValueError(f"unterminated value for {name!r}")
        if end == pos:
            raise ValueError(f"empty value for {name!r}")
        pairs.append((name, value[pos:end]))
        pos = end + 1

        if pos < length and value[pos] not in _SEPARATORS:
            raise ValueError(f"expected separator at position {pos}")


def parse_signature_header(value: Optional[str]) -> SignatureParseResult:
    """
    Parse a Signature header value.

    Component names match case-insensitively; unknown components are
    ignored and the last duplicate wins.

    Args:
        value: Raw Signature header value

    Returns:
        ParsedSignature on success, SignatureParseFailure otherwise
    """
    if not value:
        return SignatureParseFailure(
            ParseFailureReason.MISSING_HEADER, "Signature header is missing"
        )

    try:
        pairs = _tokenize_components(value)
    except ValueError as e:
        return SignatureParseFailure(ParseFailureReason.SYNTAX, str(e))

    found: Dict[str, str] = {}
    for name, component in pairs:
        field_name = REQUIRED_COMPONENTS.get(name.lower())
        if field_name is None:
            logger.debug("signature_component_ignored", component=name)
            continue
        found[field_name] = component

    missing = [
        name for name, field_name in REQUIRED_COMPONENTS.items() if field_name not in found
    ]
    if missing:
        return SignatureParseFailure(
            ParseFailureReason.MISSING_COMPONENTS,
            f"There should be 4 components in the signature, missing: {', '.join(missing)}",
        )

    return ParsedSignature(SignatureComponents(**found))


def extract_signature_components(value: Optional[str]) -> SignatureComponents:
    """
    Parse a Signature header value or raise.

    Raises:
        MalformedSignatureError: If the header is missing or malformed
    """
    result = parse_signature_header(value)
    if isinstance(result, SignatureParseFailure):
        raise MalformedSignatureError(result.message, details={"reason": result.reason.value})
    return result.components


# =============================================================================
# Body digest
# =============================================================================

def _form_text(value: Any) -> str:
    # JavaScript string conversion of parsed form values
    if value is True:
        return "true"
    if value is False:
        return "false"
    if value is None:
        return "null"
    return str(value)


def _form_quote(value: Any) -> str:
    # URLSearchParams leaves "*" literal and percent-encodes "~"
    return quote_plus(_form_text(value), safe="*").replace("~", "%7E")


def serialize_form_body(body: Body) -> str:
    """
    URL-encoded form serialization of a request body's key/value pairs.

    Args:
        body: Mapping, sequence of pairs, or a raw form-encoded str/bytes body

    Returns:
        ``application/x-www-form-urlencoded`` string
    """
    if body is None:
        return ""
    if isinstance(body, bytes):
        # Invalid UTF-8 becomes U+FFFD, as a Node body parser does; the
        # digest then no longer matches the sender's
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        pairs = parse_qsl(body, keep_blank_values=True)
    elif isinstance(body, Mapping):
        pairs = list(body.items())
    else:
        pairs = list(body)
    return "&".join(f"{_form_quote(k)}={_form_quote(v)}" for k, v in pairs)


def compute_body_digest(body: Body) -> str:
    """Base64 SHA-256 of the form-encoded body."""
    return sha256_base64(serialize_form_body(body))


def check_digest(headers: Mapping[str, str], body: Body) -> None:
    """
    Compare the Digest header against the body.

    Raises:
        DigestMismatchError: If the header is missing or does not match
    """
    header_set = headers if isinstance(headers, HeaderSet) else HeaderSet(headers)
    received = header_set.get(DIGEST_HEADER)
    if not received or not received.startswith(DIGEST_PREFIX):
        raise DigestMismatchError("The digest should be valid", details={"present": bool(received)})

    expected = compute_body_digest(body)
    if not hmac.compare_digest(received[len(DIGEST_PREFIX):].encode(), expected.encode()):
        raise DigestMismatchError("The digest should be valid")


# =============================================================================
# Verifier
# =============================================================================

class SignatureVerifier:
    """
    Verifies inbound webhook signatures for one application.

    The signature carries the canonical string encrypted for this
    application's key; it is recovered with the configured private key and
    compared byte-for-byte.
    """

    def __init__(
        self,
        config: FintectureConfig,
        padding: Optional[asym_padding.AsymmetricPadding] = None,
    ):
        self.config = config
        self.padding = padding or pkcs1v15_padding()

    def _private_key(self) -> RSAPrivateKey:
        if not self.config.private_key:
            raise ConfigError("private_key must be set to authenticate requests")
        return load_private_key(self.config.private_key)

    def verify_signature(self, components: SignatureComponents, headers: HeaderSet) -> None:
        """
        Check the signature against the canonical string it declares.

        Raises:
            ConfigError: If the private key is missing or invalid
            SignatureMismatchError: If the signature does not match
        """
        private_key = self._private_key()
        expected_payload = canonicalize(
            headers,
            components.header_names,
            request_target=self.config.webhook_request_target,
        ).encode("utf-8")

        try:
            cipher_bytes = base64.b64decode(components.signature, validate=True)
            actual_payload = rsa_decrypt(cipher_bytes, private_key, self.padding)
        except (ValueError, DecryptionError) as e:
            raise SignatureMismatchError("The signature should be valid") from e

        if not hmac.compare_digest(actual_payload, expected_payload):
            raise SignatureMismatchError("The signature should be valid")

    def authenticate(self, headers: Mapping[str, str], body: Body) -> None:
        """
        Authenticate a request, raising on the first failed check.

        Args:
            headers: Received request headers
            body: Received body (parsed form fields or raw form body)

        Raises:
            MalformedSignatureError: Signature header missing or malformed
            DigestMismatchError: Digest does not match the body
            SignatureMismatchError: Signature does not match
            ConfigError: Private key missing or invalid
        """
        header_set = headers if isinstance(headers, HeaderSet) else HeaderSet(headers)
        key_id = None
        try:
            components = extract_signature_components(header_set.get(SIGNATURE_HEADER))
            key_id = components.key_id
            check_digest(header_set, body)
            self.verify_signature(components, header_set)
        except (MalformedSignatureError, DigestMismatchError, SignatureMismatchError) as e:
            logger.warning(
                "webhook_authentication_failed",
                reason=e.code,
                detail=e.message,
                key_id=key_id,
            )
            raise

        logger.info(
            "webhook_authenticated",
            key_id=key_id,
            headers=components.header_names,
        )


def authenticate(
    request_headers: Mapping[str, str],
    request_body: Body,
    config: FintectureConfig,
) -> None:
    """
    Authenticate an inbound request with the given configuration.

    Raises:
        AuthenticationError: Subclass naming the failed check
        ConfigError: Private key missing or invalid
    """
    SignatureVerifier(config).authenticate(request_headers, request_body)
