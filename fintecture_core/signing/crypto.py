"""
Crypto Primitives
=================
SHA-256 digests and RSA sign/encrypt/decrypt helpers built on `cryptography`.
"""

import base64
import hashlib
from typing import Optional, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding as asym_padding
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey

from ..exceptions import ConfigError, DecryptionError

DIGEST_PREFIX = "SHA-256="

KeyInput = Union[str, bytes, RSAPrivateKey]


def _to_bytes(data: Union[str, bytes]) -> bytes:
    return data.encode("utf-8") if isinstance(data, str) else data


def oaep_padding() -> asym_padding.OAEP:
    """OAEP with SHA-1 MGF1, the Node.js crypto default."""
    return asym_padding.OAEP(
        mgf=asym_padding.MGF1(algorithm=hashes.SHA1()),
        algorithm=hashes.SHA1(),
        label=None,
    )


def pkcs1v15_padding() -> asym_padding.PKCS1v15:
    return asym_padding.PKCS1v15()


def sha256_base64(data: Union[str, bytes]) -> str:
    """
    Compute the Base64-encoded SHA-256 digest of data.

    Args:
        data: Raw bytes, or text encoded as UTF-8

    Returns:
        Base64 SHA-256 digest
    """
    return base64.b64encode(hashlib.sha256(_to_bytes(data)).digest()).decode("ascii")


def digest_header_value(data: Union[str, bytes]) -> str:
    """Digest header value (``SHA-256=<base64>``) for a body."""
    return DIGEST_PREFIX + sha256_base64(data)


def load_private_key(private_key: KeyInput) -> RSAPrivateKey:
    """
    Load an unencrypted PEM RSA private key.

    Raises:
        ConfigError: If the key is missing, malformed or not RSA
    """
    if isinstance(private_key, RSAPrivateKey):
        return private_key
    if not private_key:
        raise ConfigError("private_key must be set")
    try:
        key = serialization.load_pem_private_key(_to_bytes(private_key), password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise ConfigError("private_key is not a valid PEM private key") from e
    if not isinstance(key, RSAPrivateKey):
        raise ConfigError("private_key must be an RSA key")
    return key


def load_public_key(key: Union[KeyInput, RSAPublicKey]) -> RSAPublicKey:
    """
    Load a PEM RSA public key. A private key yields its public half.

    Raises:
        ConfigError: If the key is missing, malformed or not RSA
    """
    if isinstance(key, RSAPublicKey):
        return key
    if isinstance(key, RSAPrivateKey):
        return key.public_key()
    if not key:
        raise ConfigError("public key must be set")
    raw = _to_bytes(key)
    if b"PRIVATE KEY" in raw:
        return load_private_key(raw).public_key()
    try:
        public_key = serialization.load_pem_public_key(raw)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise ConfigError("public key is not a valid PEM public key") from e
    if not isinstance(public_key, RSAPublicKey):
        raise ConfigError("public key must be an RSA key")
    return public_key


def rsa_sign_sha256(data: bytes, private_key: RSAPrivateKey) -> bytes:
    """RSASSA-PKCS1-v1_5 signature over SHA-256(data)."""
    return private_key.sign(data, asym_padding.PKCS1v15(), hashes.SHA256())


def rsa_encrypt(
    plaintext: Union[str, bytes],
    key: Union[KeyInput, RSAPublicKey],
    padding: Optional[asym_padding.AsymmetricPadding] = None,
) -> bytes:
    """
    Encrypt plaintext with an RSA public key.

    Args:
        plaintext: Bytes, or text encoded as UTF-8
        key: Public key, or a private key whose public half is used
        padding: Padding mode, OAEP by default

    Returns:
        Ciphertext bytes
    """
    public_key = load_public_key(key)
    return public_key.encrypt(_to_bytes(plaintext), padding or oaep_padding())


def rsa_decrypt(
    cipher_bytes: bytes,
    private_key: KeyInput,
    padding: Optional[asym_padding.AsymmetricPadding] = None,
) -> bytes:
    """
    Decrypt ciphertext with an RSA private key.

    The padding must match the one the producer used; OAEP and PKCS#1 v1.5
    ciphertexts are not interchangeable.

    Args:
        cipher_bytes: Ciphertext
        private_key: PEM private key or loaded key
        padding: Padding mode, OAEP by default

    Returns:
        Plaintext bytes

    Raises:
        ConfigError: If the key cannot be loaded
        DecryptionError: If decryption fails
    """
    key = load_private_key(private_key)
    try:
        return key.decrypt(cipher_bytes, padding or oaep_padding())
    except ValueError as e:
        raise DecryptionError("an error occurred while decrypting") from e


def decrypt_private(digest: str, private_key: KeyInput) -> str:
    """
    Decrypt a Base64 OAEP ciphertext and return it as text.

    Raises:
        DecryptionError: If the value is not Base64 or decryption fails
    """
    try:
        cipher_bytes = base64.b64decode(digest, validate=True)
    except ValueError as e:
        raise DecryptionError("an error occurred while decrypting") from e
    plaintext = rsa_decrypt(cipher_bytes, private_key, oaep_padding())
    try:
        return plaintext.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecryptionError("decrypted value is not valid UTF-8") from e
