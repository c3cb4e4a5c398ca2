from functools import lru_cache
from pathlib import Path

from dynaconf import Dynaconf
from pydantic import BaseModel, ConfigDict, Field

BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseModel):
    model_config = ConfigDict(extra="allow")

    SERVICE_NAME: str = Field(..., description="Name of the service")
    VERSION: str = Field(..., description="Service version")
    LOG_LEVEL: str = Field("INFO", description="Logging level")
    ENABLED: bool = Field(True, description="Enable simulator loop")

    API_BASE_URL: str = Field(..., description="Flow API base URL")
    TICK_SECONDS: float = Field(5.0, description="Pause between batches")
    BATCH_SIZE: int = Field(20, ge=1, description="Flows per POST")
    REQUEST_TIMEOUT_SECONDS: float = Field(10.0, description="HTTP timeout")

    VPC_IDS: list[str] = Field(
        default_factory=lambda: ["vpc-0", "vpc-1"], min_length=1
    )
    APPS: list[str] = Field(
        default_factory=lambda: ["frontend", "checkout", "catalog", "payments"],
        min_length=1,
    )
    MAX_BYTES: int = Field(10_000, ge=0, description="Upper bound per counter")

    SEED: int | None = Field(None, description="Random seed")


dynaconf_settings = Dynaconf(
    envvar_prefix="FLOW_SIMULATOR",
    environments=True,
    settings_files=[BASE_DIR / "settings.toml", BASE_DIR / ".secrets.toml"],
    root_path=BASE_DIR,
    load_dotenv=False,
)


@lru_cache
def get_settings() -> Settings:
    return Settings(**dynaconf_settings)  # type: ignore[arg-type]
