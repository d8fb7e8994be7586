"""Error taxonomy for header, key, parse, and verification failures."""

from enum import StrEnum
from typing import Any, ClassVar


class ErrorKind(StrEnum):
    """Distinguishable failure kinds raised by josekit."""

    MALFORMED_JSON = "malformed_json"
    INVALID_OR_MISSING_TYP = "invalid_or_missing_typ"
    MISSING_ALG = "missing_alg"
    UNKNOWN_ALGORITHM = "unknown_algorithm"
    WEAK_KEY_SIZE = "weak_key_size"
    ALGORITHM_KEY_MISMATCH = "algorithm_key_mismatch"
    PASSPHRASE_REQUIRED = "passphrase_required"
    KEY_DECRYPT_ERROR = "key_decrypt_error"
    VERIFY_ONLY_KEY = "verify_only_key"
    CLOSED_BINDING = "closed_binding"
    MISSING_BEARER_PREFIX = "missing_bearer_prefix"
    MALFORMED_COMPACT_SERIALIZATION = "malformed_compact_serialization"
    MALFORMED_CLAIMS = "malformed_claims"
    MALFORMED_SIGNATURE = "malformed_signature"
    ALGORITHM_MISMATCH = "algorithm_mismatch"
    INVALID_CLAIM = "invalid_claim"
    MISSING_CLAIM = "missing_claim"
    SEALED_CLAIMS = "sealed_claims"


class JoseError(Exception):
    """Base exception for every josekit failure."""

    kind: ClassVar[ErrorKind]
    default_message: ClassVar[str] = "JOSE operation failed"

    def __init__(self, message: str | None = None, **details: Any) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def as_dict(self) -> dict[str, Any]:
        """Render the error as a plain dict for API responses."""
        return {
            "kind": str(self.kind),
            "message": self.message,
            "details": dict(self.details),
        }


class HeaderError(JoseError):
    """JOSE header could not be decoded."""


class KeyMaterialError(JoseError):
    """Key generation, loading, or binding failed."""


class ParseError(JoseError):
    """Compact serialization could not be parsed."""


class VerificationError(JoseError):
    """Token cannot be verified against the given binding."""


class ClaimsError(JoseError):
    """Claim set access or mutation failed."""


class MalformedJson(HeaderError):
    kind = ErrorKind.MALFORMED_JSON
    default_message = "Header is not a valid JSON object"


class InvalidOrMissingTyp(HeaderError):
    kind = ErrorKind.INVALID_OR_MISSING_TYP
    default_message = 'Header "typ" must be "JWT"'


class MissingAlg(HeaderError):
    kind = ErrorKind.MISSING_ALG
    default_message = 'Header "alg" is missing'


class UnknownAlgorithm(HeaderError):
    kind = ErrorKind.UNKNOWN_ALGORITHM
    default_message = "Unsupported signature algorithm"


class WeakKeySize(KeyMaterialError):
    kind = ErrorKind.WEAK_KEY_SIZE
    default_message = "Key is below the minimum allowed size"


class AlgorithmKeyMismatch(KeyMaterialError):
    kind = ErrorKind.ALGORITHM_KEY_MISMATCH
    default_message = "Key is not compatible with the algorithm"


class PassphraseRequired(KeyMaterialError):
    kind = ErrorKind.PASSPHRASE_REQUIRED
    default_message = "Private key is encrypted and no passphrase callback was given"


class KeyDecryptError(KeyMaterialError):
    kind = ErrorKind.KEY_DECRYPT_ERROR
    default_message = "Private key could not be decrypted or decoded"


class VerifyOnlyKey(KeyMaterialError):
    kind = ErrorKind.VERIFY_ONLY_KEY
    default_message = "Binding holds a public key and cannot sign"


class ClosedBinding(KeyMaterialError):
    kind = ErrorKind.CLOSED_BINDING
    default_message = "Binding was closed and its secret wiped"


class MissingBearerPrefix(ParseError):
    kind = ErrorKind.MISSING_BEARER_PREFIX
    default_message = 'Token must start with "Bearer " followed by a token'


class MalformedCompactSerialization(ParseError):
    kind = ErrorKind.MALFORMED_COMPACT_SERIALIZATION
    default_message = "Token must have three non-empty base64url segments"


class MalformedClaims(ParseError):
    kind = ErrorKind.MALFORMED_CLAIMS
    default_message = "Claims segment is not a valid JSON object"


class MalformedSignature(ParseError):
    kind = ErrorKind.MALFORMED_SIGNATURE
    default_message = "Signature is not structurally valid"


class AlgorithmMismatch(VerificationError):
    kind = ErrorKind.ALGORITHM_MISMATCH
    default_message = "Token algorithm does not match the verifying key"


class InvalidClaim(ClaimsError):
    kind = ErrorKind.INVALID_CLAIM
    default_message = "Claim has an unexpected type"


class MissingClaim(ClaimsError):
    kind = ErrorKind.MISSING_CLAIM
    default_message = "Required claim is missing"


class SealedClaims(ClaimsError):
    kind = ErrorKind.SEALED_CLAIMS
    default_message = "Claims are sealed and cannot be modified"
