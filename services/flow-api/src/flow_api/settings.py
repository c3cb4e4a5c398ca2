from functools import lru_cache
from pathlib import Path
from typing import Literal

from dynaconf import Dynaconf
from pydantic import BaseModel, ConfigDict, Field, model_validator

BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseModel):
    model_config = ConfigDict(extra="allow")

    SERVICE_NAME: str = Field(..., description="Name of the service")
    VERSION: str = Field(..., description="Service version")
    ROOT_PATH: str = Field("", description="API root path")

    HOST: str = Field("localhost", description="Bind host")
    PORT: int = Field(8080, description="Bind port")
    LOG_LEVEL: str = Field("INFO", description="Logging level")
    LOG_EVERY_N: int = Field(100, ge=1, description="Log every N merged flows")
    ALLOWED_ORIGINS: list[str] = Field(default_factory=lambda: ["*"])

    STORE_BACKEND: Literal["memory", "postgres"] = Field(
        "memory", description="Aggregation store implementation"
    )
    DB_DSN: str | None = Field(None, description="PostgreSQL DSN")
    DB_POOL_MIN_SIZE: int = Field(1, description="Minimum pool connections")
    DB_POOL_MAX_SIZE: int = Field(5, description="Maximum pool connections")

    @model_validator(mode="after")
    def _require_dsn_for_postgres(self) -> "Settings":
        if self.STORE_BACKEND == "postgres" and not self.DB_DSN:
            raise ValueError("DB_DSN is required when STORE_BACKEND is postgres")
        return self


dynaconf_settings = Dynaconf(
    envvar_prefix="FLOW_API",
    environments=True,
    settings_files=[BASE_DIR / "settings.toml", BASE_DIR / ".secrets.toml"],
    root_path=BASE_DIR,
    load_dotenv=False,
)


@lru_cache
def get_settings() -> Settings:
    return Settings(**dynaconf_settings)  # type: ignore[arg-type]
