"""
Environment-backed settings for the BarterUp API.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict, SettingsError

DEFAULT_ALLOWED_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"


class ConfigError(Exception):
    pass


def mask_key(key: str) -> str:
    if len(key) <= 8:
        return "[REDACTED]"
    return f"{key[:4]}***{key[-4:]}"


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


class DatabaseSettings(BaseModel):
    host: str
    user: str
    name: str
    password: Optional[str] = None
    pool_size: int = 16


class Settings(BaseSettings):
    """Every value comes from the variable named in its alias."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    # Supabase
    supabase_url: str = Field(validation_alias="SUPABASE_URL")
    supabase_anon_key: str = Field(validation_alias="SUPABASE_ANON_KEY")
    supabase_service_role_key: str = Field(validation_alias="SUPABASE_SERVICE_ROLE_KEY")
    supabase_timeout: float = Field(default=30.0, validation_alias="SUPABASE_TIMEOUT")
    jwt_secret: Optional[str] = Field(default=None, validation_alias="SUPABASE_JWT_SECRET")
    token_mode: Literal["verify", "unverified"] = Field(default="verify", validation_alias="AUTH_TOKEN_MODE")

    # Postgres (validated, no pool is opened)
    pg_host: str = Field(validation_alias="PG_HOST")
    pg_user: str = Field(validation_alias="PG_USER")
    pg_db: str = Field(validation_alias="PG_DB")
    pg_pass: Optional[str] = Field(default=None, validation_alias="PG_PASS")
    pg_pool_size: int = Field(default=16, validation_alias="PG_POOL_SIZE")

    # HTTP server
    allowed_origins: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: _split_origins(DEFAULT_ALLOWED_ORIGINS),
        validation_alias="ALLOWED_ORIGINS",
    )
    port: int = Field(default=8080, validation_alias="PORT")
    upload_dir: str = Field(default="uploads/profile_pictures", validation_alias="UPLOAD_DIR")
    enable_debug_routes: bool = Field(default=False, validation_alias="ENABLE_DEBUG_ROUTES")
    log_level: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"] = Field(
        default="INFO", validation_alias="LOG_LEVEL"
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_blank_values(cls, data: Any) -> Any:
        # A blank variable counts as unset
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if not (isinstance(v, str) and not v.strip())}
        return data

    @field_validator("supabase_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("token_mode", "log_level", mode="before")
    @classmethod
    def _normalize_case(cls, value: Any, info) -> Any:
        if not isinstance(value, str):
            return value
        return value.strip().upper() if info.field_name == "log_level" else value.strip().lower()

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _split_origins(value)
        return value

    @property
    def database(self) -> DatabaseSettings:
        return DatabaseSettings(
            host=self.pg_host,
            user=self.pg_user,
            name=self.pg_db,
            password=self.pg_pass,
            pool_size=self.pg_pool_size,
        )

    def describe(self) -> Dict[str, str]:
        """Loggable summary with secrets masked."""
        return {
            "supabase_url": self.supabase_url,
            "supabase_anon_key": mask_key(self.supabase_anon_key),
            "supabase_service_role_key": mask_key(self.supabase_service_role_key),
            "database": f"{self.pg_user}@{self.pg_host}/{self.pg_db}",
            "token_mode": self.token_mode,
            "allowed_origins": ",".join(self.allowed_origins),
        }


def _describe_errors(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        name = ".".join(str(part) for part in error.get("loc", ()))
        problems.append(f"{name} ({error.get('msg')})")
    return ", ".join(problems)


def load_settings(env: Optional[Dict[str, str]] = None) -> Settings:
    """
    Build Settings from the process environment and `.env`, or from the
    given mapping only.

    Raises ConfigError naming every missing or invalid variable at once.
    """
    try:
        if env is None:
            return Settings()
        return Settings.model_validate(env)
    except ValidationError as e:
        raise ConfigError(f"Invalid or missing environment variables: {_describe_errors(e)}") from e
    except SettingsError as e:
        raise ConfigError(str(e)) from e
