"""Signing key generation, PEM/DER loading, and serialization."""

import secrets
from collections.abc import Callable
from pathlib import Path

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.hazmat.primitives.asymmetric.types import (
    PrivateKeyTypes,
    PublicKeyTypes,
)

from josekit.core.errors import KeyDecryptError, PassphraseRequired, WeakKeySize
from josekit.core.settings import JoseSettings
from josekit.crypto.algorithms import Algorithm, KeyFamily
from josekit.crypto.secure import SecretBuffer

MIN_RSA_KEY_SIZE = 1024
RSA_PUBLIC_EXPONENT = 65537
PEM_MARKER = b"-----BEGIN"

PassphraseCallback = Callable[[], str | bytes]


def generate_rsa_key(bits: int | None = None) -> rsa.RSAPrivateKey:
    """Generate an RSA private key, refusing moduli below 1024 bits."""
    if bits is None:
        bits = JoseSettings().rsa_key_size
    if bits < MIN_RSA_KEY_SIZE:
        raise WeakKeySize(
            f"RSA keys must be at least {MIN_RSA_KEY_SIZE} bits, got {bits}",
            bits=bits,
            minimum=MIN_RSA_KEY_SIZE,
        )
    return rsa.generate_private_key(
        public_exponent=RSA_PUBLIC_EXPONENT,
        key_size=bits,
    )


def generate_ec_key(algorithm: Algorithm) -> ec.EllipticCurvePrivateKey:
    """Generate an EC private key on the curve an ES* algorithm requires."""
    return ec.generate_private_key(algorithm.ec_curve())


def generate_hmac_secret(algorithm: Algorithm) -> SecretBuffer:
    """Generate a random HMAC secret as long as the algorithm's digest."""
    if algorithm.family is not KeyFamily.HMAC:
        raise ValueError(f"{algorithm.value} is not an HMAC algorithm")
    return SecretBuffer(secrets.token_bytes(algorithm.digest_bits // 8))


def _deserialize_private(
    data: bytes, password: bytearray | None
) -> PrivateKeyTypes:
    if data.lstrip().startswith(PEM_MARKER):
        return serialization.load_pem_private_key(data, password=password)
    return serialization.load_der_private_key(data, password=password)


def load_private_key(
    data: bytes, passphrase_callback: PassphraseCallback | None = None
) -> PrivateKeyTypes:
    """Load a PEM or DER private key.

    The callback is only invoked, once, when the key turns out to be
    encrypted. The passphrase it returns is wiped after use.
    """
    try:
        return _deserialize_private(data, None)
    except TypeError:
        # cryptography raises TypeError when an encrypted key gets no password
        pass
    except (ValueError, UnsupportedAlgorithm) as exc:
        raise KeyDecryptError(f"Cannot decode private key: {exc}") from exc

    if passphrase_callback is None:
        raise PassphraseRequired()

    with SecretBuffer(passphrase_callback()) as passphrase:
        try:
            key = _deserialize_private(data, passphrase.value)
        except (TypeError, ValueError, UnsupportedAlgorithm) as exc:
            raise KeyDecryptError("Cannot decrypt private key with the given passphrase") from exc
    return key


def load_private_key_from_file(
    path: str | Path, passphrase_callback: PassphraseCallback | None = None
) -> PrivateKeyTypes:
    """Read and load a private key file. Missing files raise ``OSError``."""
    data = Path(path).read_bytes()
    return load_private_key(data, passphrase_callback)


def load_public_key(data: bytes) -> PublicKeyTypes:
    """Load a PEM or DER SubjectPublicKeyInfo public key."""
    try:
        if data.lstrip().startswith(PEM_MARKER):
            return serialization.load_pem_public_key(data)
        return serialization.load_der_public_key(data)
    except (ValueError, UnsupportedAlgorithm) as exc:
        raise KeyDecryptError(f"Cannot decode public key: {exc}") from exc


def load_public_key_from_file(path: str | Path) -> PublicKeyTypes:
    return load_public_key(Path(path).read_bytes())


def public_key_of(
    key: rsa.RSAPrivateKey | ec.EllipticCurvePrivateKey,
) -> rsa.RSAPublicKey | ec.EllipticCurvePublicKey:
    """Return the public half of an RSA or EC private key."""
    return key.public_key()


def private_key_pem(
    key: PrivateKeyTypes, passphrase: bytes | None = None
) -> bytes:
    """Serialize a private key to PKCS#8 PEM, encrypted when a passphrase is given."""
    encryption: serialization.KeySerializationEncryption = (
        serialization.BestAvailableEncryption(passphrase)
        if passphrase
        else serialization.NoEncryption()
    )
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=encryption,
    )


def public_key_pem(key: PublicKeyTypes) -> bytes:
    """Serialize a public key to SubjectPublicKeyInfo PEM."""
    return key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
