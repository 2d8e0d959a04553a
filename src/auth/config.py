"""
Authentication configuration settings.
Loaded from environment variables via Pydantic Settings.
"""
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AuthSettings(BaseSettings):
    """Authentication-related settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # JWT Configuration (tokens are issued by the user service and only verified here)
    jwt_secret_key: str = Field(
        default="CHANGE_ME_IN_PRODUCTION_USE_SECURE_RANDOM_STRING",
        description="Secret shared with the token issuer. MUST be changed in production!"
    )
    jwt_algorithm: str = Field(
        default="HS256",
        description="Algorithm for JWT signing"
    )
    access_token_expire_minutes: int = Field(
        default=60,
        description="Lifetime of tokens minted by create_access_token (local tooling and tests)"
    )
    user_id_claims: list[str] = Field(
        default=["userId", "id", "sub"],
        description="Token claims checked, in order, for the user identifier"
    )


# Global auth settings instance
auth_settings = AuthSettings()
