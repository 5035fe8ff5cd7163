"""
Application settings loaded from environment (.env).
Single source of truth; values are validated on first access.
"""
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tournament_api.core.readiness import Role


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent.parent


DbDriver = Literal["mysql", "sqlite"]
SslMode = Literal["disable", "require", "verify-ca", "verify-full"]


class Settings(BaseSettings):
    """Validated configuration from env and .env file."""

    model_config = SettingsConfigDict(
        env_file=_project_root() / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Paths
    base_dir: Path = _project_root()

    # Deployment identity: role governs write gating and health semantics,
    # region is echoed back so the frontend can show which server answered.
    role: Role = Field(default=Role.PRIMARY, validation_alias=AliasChoices("ROLE", "SERVER_ROLE"))
    region: str = Field(default="Unknown", validation_alias=AliasChoices("REGION", "WEBSITE_LOCATION"))

    # Database (AZURE_SQL_* names kept so existing App Service configs keep working)
    db_driver: DbDriver = Field(default="mysql", validation_alias="DB_DRIVER")
    db_host: str = Field(default="localhost", validation_alias=AliasChoices("DB_HOST", "AZURE_SQL_SERVER"))
    db_port: int = Field(default=3306, validation_alias=AliasChoices("DB_PORT", "AZURE_SQL_PORT"))
    db_user: str = Field(default="root", validation_alias=AliasChoices("DB_USER", "AZURE_SQL_USERNAME"))
    db_password: str = Field(default="", validation_alias=AliasChoices("DB_PASSWORD", "AZURE_SQL_PASSWORD"))
    db_name: str = Field(default="tournament", validation_alias=AliasChoices("DB_NAME", "AZURE_SQL_DATABASE"))
    db_ssl_mode: SslMode = Field(default="disable", validation_alias="DB_SSL_MODE")
    db_ssl_ca: str = Field(default="", validation_alias="DB_SSL_CA")
    db_pool_size: int = Field(default=10, ge=1, validation_alias="DB_POOL_SIZE")
    db_pool_timeout: float = Field(default=30.0, gt=0, validation_alias="DB_POOL_TIMEOUT")
    db_connect_timeout: int = Field(default=10, ge=1, validation_alias="DB_CONNECT_TIMEOUT")
    db_sqlite_path: str = Field(default="database/tournament.db", validation_alias="DB_SQLITE_PATH")

    # Server
    port: int = Field(default=8080, validation_alias="PORT")

    # Ops
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str = Field(default="", validation_alias="LOG_FILE")
    rate_limit_writes: str = Field(default="30/minute", validation_alias="RATE_LIMIT_WRITES")

    @field_validator("role", "db_driver", "db_ssl_mode", mode="before")
    @classmethod
    def normalise_choice(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalise_log_level(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().upper() or "INFO"
        return v

    @computed_field
    @property
    def is_primary(self) -> bool:
        return self.role == Role.PRIMARY

    @property
    def static_dir(self) -> Path:
        return self.base_dir / "static"

    @property
    def sqlite_path(self) -> Path:
        p = Path(self.db_sqlite_path)
        if not p.is_absolute():
            p = self.base_dir / p
        return p


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return singleton settings instance. Validates on first access."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
