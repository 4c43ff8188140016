"""
Outbound Signer
===============
RSA-SHA256 signatures over the canonical signing string, packaged as an
HTTP-Signature style header value:

    keyId="<app_id>",algorithm="rsa-sha256",headers="<names>",signature="<base64>"
"""

import base64
import json
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

import structlog
from cryptography.hazmat.primitives.asymmetric import padding as asym_padding

from ..config import FintectureConfig
from ..exceptions import ConfigError, SigningError, UnsupportedAlgorithmError
from .canonical import REQUEST_TARGET, canonicalize, signed_header_names
from .crypto import load_private_key, pkcs1v15_padding, rsa_encrypt, rsa_sign_sha256
from .models import DEFAULT_ALGORITHM, SignatureAlgorithm

logger = structlog.get_logger(__name__)

# Headers covered by API request signatures, in signing order
SIGNED_HEADER_PARAMETER_LIST: Sequence[str] = (
    REQUEST_TARGET,
    "Date",
    "Digest",
    "X-Request-ID",
)

# Headers covered by Connect session signatures
CONNECT_HEADER_PARAMETER_LIST: Sequence[str] = (
    "Date",
    "X-Request-ID",
)


def format_signature_header(key_id: str, header_names: Iterable[str], signature: str) -> str:
    """Assemble the four-component Signature header value."""
    return (
        f'keyId="{key_id}",'
        f'algorithm="{SignatureAlgorithm.RSA_SHA256.value}",'
        f'headers="{" ".join(header_names)}",'
        f'signature="{signature}"'
    )


def _serialize_payload(payload: Any) -> bytes:
    if isinstance(payload, bytes):
        return payload
    if not isinstance(payload, str):
        payload = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    return payload.encode("utf-8")


def sign(
    payload: Any,
    private_key: Union[str, bytes],
    algorithm: Union[str, SignatureAlgorithm] = DEFAULT_ALGORITHM,
) -> str:
    """
    Sign a payload with RSA-SHA256.

    Args:
        payload: Text or bytes to sign; other values are signed as compact JSON
        private_key: PEM-encoded RSA private key
        algorithm: Must be "rsa-sha256" (exact match)

    Returns:
        Base64-encoded signature

    Raises:
        UnsupportedAlgorithmError: If algorithm is not rsa-sha256
        ConfigError: If private_key is empty
        SigningError: If the key is malformed or signing fails
    """
    if algorithm is None:
        algorithm = DEFAULT_ALGORITHM
    if algorithm != SignatureAlgorithm.RSA_SHA256:
        raise UnsupportedAlgorithmError(
            "invalid signature algorithm",
            details={"algorithm": str(algorithm)},
        )
    if not private_key:
        raise ConfigError("private_key must be set to sign requests")

    data = _serialize_payload(payload)
    try:
        key = load_private_key(private_key)
        signature = rsa_sign_sha256(data, key)
    except (ConfigError, ValueError, TypeError) as e:
        raise SigningError("error during signature") from e

    return base64.b64encode(signature).decode("ascii")


def build_signature_header(
    headers: Mapping[str, str],
    config: FintectureConfig,
    header_names: Sequence[str] = SIGNED_HEADER_PARAMETER_LIST,
) -> str:
    """
    Build the Signature header value for an outbound request.

    Only headers present in ``headers`` with a non-empty value take part,
    in the order of ``header_names``.

    Args:
        headers: Request headers (may include ``(request-target)``)
        config: Application configuration (app_id, private_key)
        header_names: Signing order

    Returns:
        Signature header value

    Raises:
        ConfigError: If config.private_key is missing
        SigningError: If signing fails
    """
    if not config.private_key:
        raise ConfigError("private_key must be set to use this function")

    names = signed_header_names(headers, header_names, skip_empty=True)
    signing_string = canonicalize(headers, header_names, skip_empty=True)
    signature = sign(signing_string, config.private_key)

    logger.debug("signature_header_built", key_id=config.app_id, headers=names)
    return format_signature_header(config.app_id, names, signature)


def connect_signature(headers: Mapping[str, str], config: FintectureConfig) -> str:
    """
    Bare signature over the Connect header list.

    Raises:
        ConfigError: If config.private_key is missing
        SigningError: If signing fails
    """
    if not config.private_key:
        raise ConfigError("private_key must be set to use this function")
    signing_string = canonicalize(headers, CONNECT_HEADER_PARAMETER_LIST, skip_empty=True)
    return sign(signing_string, config.private_key)


def build_webhook_signature_header(
    headers: Mapping[str, str],
    key_id: str,
    public_key: Any,
    header_names: Sequence[str],
    request_target: Optional[str] = None,
    padding: Optional[asym_padding.AsymmetricPadding] = None,
) -> str:
    """
    Produce a webhook Signature header the inbound verifier accepts.

    The canonical string is encrypted with the receiver's public key, so the
    receiver recovers it with its private key.

    Args:
        headers: Webhook headers (Date, Digest, X-Request-ID...)
        key_id: Identifier placed in keyId
        public_key: Receiver's public key, or its private key
        header_names: Signing order
        request_target: Value for ``(request-target)``
        padding: Encryption padding, PKCS#1 v1.5 by default

    Returns:
        Signature header value
    """
    names = signed_header_names(headers, header_names, request_target)
    signing_string = canonicalize(headers, header_names, request_target)
    cipher_bytes = rsa_encrypt(signing_string, public_key, padding or pkcs1v15_padding())
    return format_signature_header(
        key_id, names, base64.b64encode(cipher_bytes).decode("ascii")
    )
