"""Environment-driven settings and the built-in provider defaults."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER_RECORDS = (
    {
        "Name": "Edge",
        "Provider": "9e3b3947-ca5d-4614-91a2-7b624e0e7244",
        "Id": 211,
        "Version": 0,
        "FieldName": "Name",
    },
    {
        "Name": "Chrome",
        "Provider": "d2d578d9-2936-45b6-a09f-30e32715f42d",
        "Id": 1,
        "Version": 0,
        "FieldName": "Name",
    },
)


class Settings:

    def __init__(
        self,
        output_dir: str | Path | None = None,
        log_level: str | None = None,
        api_key: str | None = None,
    ):
        self._output_dir = output_dir or os.getenv("ROIGEN_OUTPUT_DIR") or None
        self._log_level = log_level or os.getenv("ROIGEN_LOG_LEVEL", "INFO")
        self._api_key = api_key if api_key is not None else os.getenv("API_KEY", "")

    @property
    def output_dir(self) -> Path:
        # Working directory at call time, not at import.
        if self._output_dir:
            return Path(self._output_dir)
        return Path.cwd()

    @property
    def log_level(self) -> str:
        return self._log_level.upper()

    @property
    def api_key(self) -> str:
        return self._api_key

    def default_providers(self) -> list[dict]:
        return [dict(record) for record in DEFAULT_PROVIDER_RECORDS]


_default_instance: Settings | None = None


def get_settings() -> Settings:
    global _default_instance
    if _default_instance is None:
        _default_instance = Settings()
        logger.debug(
            "settings.loaded output_dir=%s log_level=%s api_key_set=%s",
            _default_instance.output_dir,
            _default_instance.log_level,
            bool(_default_instance.api_key),
        )
    return _default_instance


def set_settings(instance: Settings) -> None:
    global _default_instance
    _default_instance = instance


def reset_settings() -> None:
    global _default_instance
    _default_instance = None
