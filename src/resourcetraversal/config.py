import logging
import sys
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/133.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    """Central application settings loaded from environment variables."""

    profile_dir: Path = Field(
        default=Path(".auth") / "chromium-profile", alias="TRAVERSAL_PROFILE_DIR"
    )
    browser_channel: str = Field(default="chrome", alias="BROWSER_CHANNEL")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, alias="BROWSER_USER_AGENT")
    navigation_timeout: int = Field(default=30, ge=5, alias="NAVIGATION_TIMEOUT")
    settle_delay: float = Field(default=5.0, ge=0.0, alias="SETTLE_DELAY_SECONDS")
    raw_settle_delay: float = Field(default=2.0, ge=0.0, alias="RAW_SETTLE_DELAY_SECONDS")
    barrier_settle_delay: float = Field(
        default=5.0, ge=0.0, alias="BARRIER_SETTLE_DELAY_SECONDS"
    )
    login_timeout: int = Field(default=300, ge=10, alias="LOGIN_TIMEOUT")
    login_url: str = Field(default="https://accounts.google.com", alias="LOGIN_URL")
    log_level: Literal["debug", "info", "warning"] = Field(default="info", alias="LOG_LEVEL")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def configure_logging(settings: Settings) -> None:
    # stdout belongs to the MCP transport and the CLI console
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
