import os
from pathlib import Path
from typing import Optional

import platformdirs
import pydantic

CONFIG_ENV_VAR = "ITGLUE_CONFIG"
CONFIG_NAME = "config.json"

DEFAULT_API_URL = os.environ.get("ITGLUE_API_URL", "https://api.itglue.com")
DEFAULT_LOGIN_URL = os.environ.get("ITGLUE_LOGIN_URL", "https://itglue.com")
DEFAULT_TOKEN_API_URL = os.environ.get(
    "ITGLUE_TOKEN_API_URL", "https://api-mobile-prod.itglue.com/api"
)


class CliConfig(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(extra="ignore", populate_by_name=True)

    api_url: str = DEFAULT_API_URL
    login_url: str = DEFAULT_LOGIN_URL
    token_api_url: str = DEFAULT_TOKEN_API_URL
    email: Optional[str] = None
    page_size: int = pydantic.Field(50, ge=1, le=1000)
    max_attempts: Optional[int] = pydantic.Field(5, ge=1)
    retry_delay: float = pydantic.Field(5.0, ge=0)
    log_file: Optional[str] = None


def get_config_path() -> Path:
    path = os.environ.get(CONFIG_ENV_VAR)
    if path:
        return Path(path)
    config_dir = platformdirs.user_config_dir("itglue", appauthor=False, roaming=True)
    return Path(config_dir) / CONFIG_NAME


def read_config() -> CliConfig:
    path = get_config_path()
    if path.exists():
        return CliConfig.model_validate_json(path.read_text())
    return CliConfig()


def write_config(config: CliConfig):
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(config.model_dump_json(indent=2))


_UNCHANGED = object()


def update_config(
    api_url: Optional[str] = _UNCHANGED,
    login_url: Optional[str] = _UNCHANGED,
    token_api_url: Optional[str] = _UNCHANGED,
    email: Optional[str] = _UNCHANGED,
    page_size: Optional[int] = _UNCHANGED,
    max_attempts: Optional[int] = _UNCHANGED,
    retry_delay: Optional[float] = _UNCHANGED,
    log_file: Optional[str] = _UNCHANGED,
) -> CliConfig:
    cfg = read_config()
    update = {
        k: v
        for k, v in {
            "api_url": api_url,
            "login_url": login_url,
            "token_api_url": token_api_url,
            "email": email,
            "page_size": page_size,
            "max_attempts": max_attempts,
            "retry_delay": retry_delay,
            "log_file": log_file,
        }.items()
        if v is not _UNCHANGED
    }
    # model_copy skips validation, so round-trip through the validator
    copy = CliConfig.model_validate({**cfg.model_dump(), **update})
    write_config(copy)
    return copy
