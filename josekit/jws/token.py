"""Parsed compact JWS token and its verification."""

from collections.abc import Callable

import structlog
from pydantic import BaseModel, ConfigDict

from josekit.core.errors import AlgorithmMismatch
from josekit.crypto.binding import KeyBinding
from josekit.jws.claims import Claims
from josekit.jws.header import Header

ClaimsValidator = Callable[[Claims], object]

logger = structlog.get_logger(__name__)


class JwsToken(BaseModel):
    """Structurally valid, not yet verified, compact JWS."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    raw: str
    header: Header
    claims: Claims
    signature: bytes

    @property
    def signing_input(self) -> bytes:
        """The exact ``header.claims`` bytes that were signed."""
        return self.raw.rsplit(".", 1)[0].encode("ascii")

    def verify(
        self, binding: KeyBinding, claims_validator: ClaimsValidator | None = None
    ) -> bool:
        """Verify the signature and, if given, the claims validator.

        A token signed with a different algorithm than the binding's raises
        ``AlgorithmMismatch`` before anything else is checked. A bad
        signature returns False without running the validator.
        """
        if self.header.alg is not binding.algorithm:
            logger.warning(
                "jws_algorithm_mismatch",
                token_alg=self.header.alg.value,
                binding_alg=binding.algorithm.value,
            )
            raise AlgorithmMismatch(
                f"Token is signed with {self.header.alg.value}, "
                f"binding expects {binding.algorithm.value}",
                token_alg=self.header.alg.value,
                binding_alg=binding.algorithm.value,
            )

        if not binding.verify(self.signing_input, self.signature):
            logger.info("jws_signature_invalid", alg=self.header.alg.value, kid=self.header.kid)
            return False

        if claims_validator is None:
            return True
        accepted = bool(claims_validator(self.claims))
        if not accepted:
            logger.info("jws_claims_rejected", alg=self.header.alg.value, kid=self.header.kid)
        return accepted
