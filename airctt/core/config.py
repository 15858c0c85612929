"""
Application configuration

All settings are managed with Pydantic Settings. Values are read from the
environment and from the ``.env`` file one level above the project root, with
type validation and defaults.

Key concepts:
- BaseSettings: reads every field from environment variables
- computed_field: derived values built from other fields
- model_validator: custom checks run after loading
"""
import secrets
import uuid
import warnings
from typing import Annotated, Any, Literal

from pydantic import (
    AnyUrl,
    BeforeValidator,
    HttpUrl,
    PostgresDsn,
    computed_field,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Self

from airctt.enums import RewardFallback


def parse_cors(v: Any) -> list[str] | str:
    """
    Parse a CORS origins value

    Two formats are accepted:
    1. Comma separated string: "http://localhost:3000,http://localhost:3001"
    2. List: ["http://localhost:3000", "http://localhost:3001"]

    Args:
        v: raw configuration value (string or list)

    Returns:
        The parsed list, or the JSON string for pydantic to decode

    Raises:
        ValueError: when the input is neither form
    """
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",") if i.strip()]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    """
    Application settings

    Resolution order:
    1. Environment variables (highest)
    2. The .env file
    3. Defaults declared here (lowest)
    """
    model_config = SettingsConfigDict(
        env_file="../.env",
        env_ignore_empty=True,
        extra="ignore",
    )
    API_PREFIX: str = "/api"  # prefix of the consumer/merchant API
    NEXT_API_PREFIX: str = "/next_api"  # prefix of the code+message envelope family
    SECRET_KEY: str = secrets.token_urlsafe(32)  # HS256 key shared with the identity provider
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"

    BACKEND_CORS_ORIGINS: Annotated[
        list[AnyUrl] | str, BeforeValidator(parse_cors)
    ] = []

    @computed_field  # type: ignore[prop-decorator]
    @property
    def all_cors_origins(self) -> list[str]:
        """
        CORS origins with trailing slashes removed

        Returns:
            List of allowed origins as strings
        """
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS]

    PROJECT_NAME: str = "AIRCTT"
    SENTRY_DSN: HttpUrl | None = None

    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = "airctt"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def SQLALCHEMY_DATABASE_URI(self) -> PostgresDsn:
        return PostgresDsn.build(
            scheme="postgresql+psycopg",
            username=self.POSTGRES_USER,
            password=self.POSTGRES_PASSWORD,
            host=self.POSTGRES_SERVER,
            port=self.POSTGRES_PORT,
            path=self.POSTGRES_DB,
        )

    # Consumer used when a wallet request carries no bearer token
    ANONYMOUS_CONSUMER_ID: uuid.UUID = uuid.UUID(int=0)

    # Reward policy applied when a game session finishes successfully
    REWARD_TYPE: str = "COUPON_90"  # COUPON_* pays a coupon, anything else pays points
    REWARD_VALUE: int = 90
    REWARD_POINTS_DEFAULT: int = 100  # points paid when a points reward has no value
    REWARD_NO_TEMPLATE_FALLBACK: RewardFallback = RewardFallback.fail

    # Wallet
    WALLET_ALLOW_NEGATIVE_BALANCE: bool = True  # False guards debits against overdraft

    # Coupon codes are hex strings of twice this many characters
    COUPON_CODE_BYTES: int = 5

    def _check_default_secret(self, var_name: str, value: str | None) -> None:
        """
        Refuse the placeholder "changethis" outside local development

        Args:
            var_name: setting name
            value: setting value

        Raises:
            ValueError: when a deployed environment still uses the placeholder
        """
        if value == "changethis":
            message = (
                f'The value of {var_name} is "changethis", '
                "for security, please change it, at least for deployments."
            )
            if self.ENVIRONMENT == "local":
                warnings.warn(message, stacklevel=1)
            else:
                raise ValueError(message)

    @model_validator(mode="after")
    def _enforce_non_default_secrets(self) -> Self:
        self._check_default_secret("SECRET_KEY", self.SECRET_KEY)
        self._check_default_secret("POSTGRES_PASSWORD", self.POSTGRES_PASSWORD)

        return self


settings = Settings()  # type: ignore
