"""Pairing of one signature algorithm with one compatible key."""

from types import TracebackType
from typing import Any, Self

from cryptography.hazmat.primitives.asymmetric import ec, rsa
from jwt.algorithms import get_default_algorithms
from jwt.utils import is_pem_format, is_ssh_key

from josekit.core.errors import (
    AlgorithmKeyMismatch,
    ClosedBinding,
    MalformedSignature,
    VerifyOnlyKey,
    WeakKeySize,
)
from josekit.crypto.algorithms import Algorithm, KeyFamily, resolve
from josekit.crypto.keys import public_key_of
from josekit.crypto.secure import SecretBuffer

KeyMaterial = (
    rsa.RSAPrivateKey
    | rsa.RSAPublicKey
    | ec.EllipticCurvePrivateKey
    | ec.EllipticCurvePublicKey
    | SecretBuffer
    | bytes
    | bytearray
    | str
)


def key_family_of(key: Any) -> KeyFamily | None:
    """Classify key material, or return None for unsupported key types."""
    if isinstance(key, rsa.RSAPrivateKey | rsa.RSAPublicKey):
        return KeyFamily.RSA
    if isinstance(key, ec.EllipticCurvePrivateKey | ec.EllipticCurvePublicKey):
        return KeyFamily.EC
    if isinstance(key, SecretBuffer | bytes | bytearray | str):
        return KeyFamily.HMAC
    return None


def _ec_signature_size(key: ec.EllipticCurvePublicKey) -> int:
    return 2 * ((key.curve.key_size + 7) // 8)


class KeyBinding:
    """Signer/verifier handle for one algorithm and one key.

    Private RSA/EC keys and HMAC secrets can sign and verify; public keys
    can only verify. Incompatible pairings are rejected here, before any
    signing happens. HMAC secrets are copied into a ``SecretBuffer`` owned
    by the binding and wiped by ``close()``.
    """

    __slots__ = (
        "_algorithm",
        "_can_sign",
        "_closed",
        "_key",
        "_kid",
        "_primitive",
        "_verify_key",
    )

    def __init__(
        self,
        algorithm: Algorithm | str,
        key: KeyMaterial,
        *,
        kid: str | None = None,
    ) -> None:
        alg = algorithm if isinstance(algorithm, Algorithm) else resolve(algorithm)
        family = key_family_of(key)
        if family is None:
            raise AlgorithmKeyMismatch(
                f"Unsupported key type {type(key).__name__} for {alg.value}",
                alg=alg.value,
            )
        if family is not alg.family:
            raise AlgorithmKeyMismatch(
                f"{family.value} key cannot be used with {alg.value}",
                alg=alg.value,
                key_family=family.value,
            )

        if family is KeyFamily.HMAC:
            secret = SecretBuffer(key.value) if isinstance(key, SecretBuffer) else SecretBuffer(key)
            if not secret:
                raise WeakKeySize("HMAC secret must not be empty", alg=alg.value)
            if is_pem_format(secret.value) or is_ssh_key(secret.value):
                secret.wipe()
                raise AlgorithmKeyMismatch(
                    f"A PEM or SSH key cannot be used as an {alg.value} secret",
                    alg=alg.value,
                )
            self._key: Any = secret
            self._verify_key: Any = secret
            self._can_sign = True
        else:
            if family is KeyFamily.EC and key.curve.name != alg.ec_curve().name:
                raise AlgorithmKeyMismatch(
                    f"{alg.value} requires curve {alg.ec_curve().name}, got {key.curve.name}",
                    alg=alg.value,
                    curve=key.curve.name,
                )
            self._can_sign = isinstance(key, rsa.RSAPrivateKey | ec.EllipticCurvePrivateKey)
            self._key = key
            self._verify_key = public_key_of(key) if self._can_sign else key

        self._algorithm = alg
        self._kid = kid
        self._closed = False
        self._primitive = get_default_algorithms()[alg.value]

    @property
    def algorithm(self) -> Algorithm:
        return self._algorithm

    @property
    def kid(self) -> str | None:
        return self._kid

    @property
    def can_sign(self) -> bool:
        return self._can_sign

    def _ensure_open(self) -> None:
        if self._closed:
            raise ClosedBinding(alg=self._algorithm.value)

    def _raw_key(self, key: Any) -> Any:
        return key.value if isinstance(key, SecretBuffer) else key

    def sign(self, message: bytes) -> bytes:
        """Sign ``message`` with the bound private key or secret."""
        self._ensure_open()
        if not self._can_sign:
            raise VerifyOnlyKey(alg=self._algorithm.value)
        return self._primitive.sign(message, self._raw_key(self._key))

    def verify(self, message: bytes, signature: bytes) -> bool:
        """Return whether ``signature`` is valid for ``message``.

        A wrong signature returns False. Only an ECDSA signature of the
        wrong length for the curve raises ``MalformedSignature``.
        """
        self._ensure_open()
        if self._algorithm.family is KeyFamily.EC:
            expected = _ec_signature_size(self._verify_key)
            if len(signature) != expected:
                raise MalformedSignature(
                    f"{self._algorithm.value} signatures are {expected} bytes, got {len(signature)}",
                    alg=self._algorithm.value,
                )
        return bool(self._primitive.verify(message, self._raw_key(self._verify_key), signature))

    def close(self) -> None:
        """Wipe an owned HMAC secret and refuse further use.

        Asymmetric keys are left to the caller.
        """
        self._closed = True
        if isinstance(self._key, SecretBuffer):
            self._key.wipe()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        mode = "sign+verify" if self._can_sign else "verify"
        return f"KeyBinding({self._algorithm.value}, {mode})"
