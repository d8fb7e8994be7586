"""Library settings loaded from environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict

RSA_KEY_SIZE_DEFAULT = 2048
CLOCK_LEEWAY_DEFAULT = 0


class JoseSettings(BaseSettings):
    """Key generation, claim checking, and logging settings."""

    model_config = SettingsConfigDict(env_prefix="JOSE_")

    rsa_key_size: int = RSA_KEY_SIZE_DEFAULT
    clock_leeway_seconds: int = CLOCK_LEEWAY_DEFAULT
    log_level: str = "info"
    log_json: bool = False
