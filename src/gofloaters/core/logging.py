"""
Logging setup for the API process and the CLI.

`config/logging.yaml` sends everything to stderr; the level comes from settings
(`app.log_level`, or `GOFLOATERS_LOG_LEVEL`) and is applied to the root logger
and every handler. What gets logged:
- `gofloaters.ingestion.spaces_client`: each upstream URL + params at INFO, a
  failed fetch with no cached copy to fall back on at WARNING
- `gofloaters.core.cache`: failed cache writes at WARNING
- `gofloaters.api.routes`: requests answered with "Failed to fetch spaces" at ERROR
- `gofloaters.listings.normalize`: skipped malformed space records at WARNING
- `gofloaters.location.provider`: a failed device fix (before falling back) at INFO

httpx and uvicorn access logs are held at WARNING so they do not drown these out.
"""

from __future__ import annotations

import logging.config

from gofloaters.config.settings import get_logging_config, get_settings


def configure_logging() -> None:
    level = get_settings().app.log_level.upper()
    config = dict(get_logging_config())
    config["root"] = {**config.get("root", {}), "level": level}
    config["handlers"] = {
        name: {**handler, "level": level} if isinstance(handler, dict) and "level" in handler else handler
        for name, handler in config.get("handlers", {}).items()
    }
    logging.config.dictConfig(config)
