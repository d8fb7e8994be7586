"""Tests for key-algorithm bindings."""

import hashlib
import hmac

import pytest
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from josekit.core.errors import (
    AlgorithmKeyMismatch,
    ClosedBinding,
    KeyMaterialError,
    MalformedSignature,
    UnknownAlgorithm,
    VerifyOnlyKey,
    WeakKeySize,
)
from josekit.crypto.algorithms import Algorithm
from josekit.crypto.binding import KeyBinding
from josekit.crypto.keys import generate_hmac_secret, public_key_pem
from josekit.crypto.secure import SecretBuffer

MESSAGE = b"header.claims"


class TestBindingConstruction:
    """Tests for family compatibility checks."""

    @pytest.mark.parametrize("alg", [Algorithm.RS256, Algorithm.RS384, Algorithm.RS512])
    def test_rsa_key_accepts_rsa_algorithms(
        self, rsa_key: rsa.RSAPrivateKey, alg: Algorithm
    ) -> None:
        binding = KeyBinding(alg, rsa_key)
        assert binding.algorithm is alg
        assert binding.can_sign

    @pytest.mark.parametrize("alg", [Algorithm.HS256, Algorithm.ES384])
    def test_rsa_key_rejects_other_families(
        self, rsa_key: rsa.RSAPrivateKey, alg: Algorithm
    ) -> None:
        with pytest.raises(AlgorithmKeyMismatch):
            KeyBinding(alg, rsa_key)

    def test_hmac_secret_rejects_rsa_algorithm(self) -> None:
        with pytest.raises(AlgorithmKeyMismatch):
            KeyBinding(Algorithm.RS256, b"secret")

    def test_ec_curve_must_match(self, ec_keys: dict[Algorithm, ec.EllipticCurvePrivateKey]) -> None:
        with pytest.raises(AlgorithmKeyMismatch):
            KeyBinding(Algorithm.ES384, ec_keys[Algorithm.ES256])

    def test_unsupported_key_type(self) -> None:
        with pytest.raises(AlgorithmKeyMismatch):
            KeyBinding(Algorithm.HS256, 12345)  # type: ignore[arg-type]

    def test_algorithm_string_resolved(self, rsa_key: rsa.RSAPrivateKey) -> None:
        assert KeyBinding("RS384", rsa_key).algorithm is Algorithm.RS384

    def test_unknown_algorithm_string(self, rsa_key: rsa.RSAPrivateKey) -> None:
        with pytest.raises(UnknownAlgorithm):
            KeyBinding("rs256", rsa_key)

    def test_empty_hmac_secret_rejected(self) -> None:
        with pytest.raises(WeakKeySize):
            KeyBinding(Algorithm.HS256, b"")

    def test_pem_key_rejected_as_hmac_secret(self, rsa_public_key: rsa.RSAPublicKey) -> None:
        with pytest.raises(AlgorithmKeyMismatch):
            KeyBinding(Algorithm.HS256, public_key_pem(rsa_public_key))

    def test_ssh_key_rejected_as_hmac_secret(self) -> None:
        with pytest.raises(AlgorithmKeyMismatch):
            KeyBinding(Algorithm.HS384, "ssh-rsa AAAAB3NzaC1yc2EAAAADAQABAAABAQC user@host")

    def test_public_key_is_verify_only(self, rsa_public_key: rsa.RSAPublicKey) -> None:
        binding = KeyBinding(Algorithm.RS256, rsa_public_key)
        assert not binding.can_sign
        with pytest.raises(VerifyOnlyKey):
            binding.sign(MESSAGE)


class TestSignVerify:
    """Tests for binding-level sign and verify."""

    def test_rsa_public_binding_verifies(
        self, rsa_key: rsa.RSAPrivateKey, rsa_public_key: rsa.RSAPublicKey
    ) -> None:
        signature = KeyBinding(Algorithm.RS256, rsa_key).sign(MESSAGE)
        assert KeyBinding(Algorithm.RS256, rsa_public_key).verify(MESSAGE, signature)

    def test_rsa_signature_is_deterministic(self, rsa_key: rsa.RSAPrivateKey) -> None:
        binding = KeyBinding(Algorithm.RS512, rsa_key)
        assert binding.sign(MESSAGE) == binding.sign(MESSAGE)

    def test_wrong_signature_returns_false(self, rsa_key: rsa.RSAPrivateKey) -> None:
        binding = KeyBinding(Algorithm.RS256, rsa_key)
        signature = binding.sign(MESSAGE)
        assert binding.verify(b"other", signature) is False
        assert binding.verify(MESSAGE, b"\x00" * len(signature)) is False

    def test_hmac_roundtrip(self) -> None:
        binding = KeyBinding(Algorithm.HS256, generate_hmac_secret(Algorithm.HS256))
        signature = binding.sign(MESSAGE)
        assert len(signature) == 32
        assert binding.verify(MESSAGE, signature)
        assert not binding.verify(MESSAGE, signature[:-1] + bytes([signature[-1] ^ 1]))

    def test_hmac_keys_from_str_and_bytes_agree(self) -> None:
        sig_a = KeyBinding(Algorithm.HS384, "shared-secret").sign(MESSAGE)
        sig_b = KeyBinding(Algorithm.HS384, b"shared-secret").sign(MESSAGE)
        assert sig_a == sig_b

    @pytest.mark.parametrize(
        ("alg", "size"), [(Algorithm.ES256, 64), (Algorithm.ES384, 96), (Algorithm.ES512, 132)]
    )
    def test_ec_roundtrip(
        self,
        ec_keys: dict[Algorithm, ec.EllipticCurvePrivateKey],
        alg: Algorithm,
        size: int,
    ) -> None:
        key = ec_keys[alg]
        signature = KeyBinding(alg, key).sign(MESSAGE)
        assert len(signature) == size
        assert KeyBinding(alg, key.public_key()).verify(MESSAGE, signature)

    def test_ec_wrong_length_is_malformed(
        self, ec_keys: dict[Algorithm, ec.EllipticCurvePrivateKey]
    ) -> None:
        binding = KeyBinding(Algorithm.ES256, ec_keys[Algorithm.ES256])
        with pytest.raises(MalformedSignature):
            binding.verify(MESSAGE, b"\x01" * 10)


class TestClose:
    """Tests for secret wiping and use after close."""

    def test_close_wipes_owned_secret(self) -> None:
        source = SecretBuffer(b"top-secret")
        with KeyBinding(Algorithm.HS512, source) as binding:
            binding.sign(MESSAGE)
        assert source.value == bytearray(b"top-secret")
        assert binding._key.value == bytearray()

    def test_repr_does_not_leak_secret(self) -> None:
        binding = KeyBinding(Algorithm.HS256, b"top-secret")
        assert "top-secret" not in repr(binding)
        assert "HS256" in repr(binding)

    def test_sign_after_close_raises(self) -> None:
        binding = KeyBinding(Algorithm.HS256, b"top-secret")
        binding.close()
        with pytest.raises(ClosedBinding) as exc_info:
            binding.sign(MESSAGE)
        assert isinstance(exc_info.value, KeyMaterialError)

    def test_verify_after_close_raises(self, rsa_key: rsa.RSAPrivateKey) -> None:
        binding = KeyBinding(Algorithm.RS256, rsa_key)
        signature = binding.sign(MESSAGE)
        binding.close()
        with pytest.raises(ClosedBinding):
            binding.verify(MESSAGE, signature)

    def test_closed_hmac_binding_rejects_empty_key_signature(self) -> None:
        binding = KeyBinding(Algorithm.HS256, b"top-secret")
        binding.close()
        forged = hmac.new(b"", MESSAGE, hashlib.sha256).digest()
        with pytest.raises(ClosedBinding):
            binding.verify(MESSAGE, forged)
