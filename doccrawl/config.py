# === FILE: doccrawl/config.py ===
"""
Loading and validation of the crawler configuration.
Pydantic describes the schema and checks the values.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

USER_AGENT_NAME = "MagicDocsBot"
DEFAULT_CRAWL_DELAY = 0.5
DEFAULT_TIMEOUT = 10.0


class CrawlerConfig(BaseModel):
    """Settings shared by every crawl run."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    user_agent: str = Field(USER_AGENT_NAME, min_length=1, description="User-Agent header and robots.txt agent.")
    max_depth: Optional[int] = Field(None, ge=0, description="Maximum relative depth; None means unbounded.")
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0, description="Per-request timeout (seconds).")
    default_delay: float = Field(
        DEFAULT_CRAWL_DELAY, ge=0, description="Pause between pages when robots.txt sets no Crawl-delay (seconds)."
    )

    @field_validator("user_agent", mode="before")
    def _strip_user_agent(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None] = None) -> CrawlerConfig:
    """
    Read a YAML or JSON file and return a validated CrawlerConfig.

    Without *path* the optional ``configs/default.yaml`` is used, and plain
    defaults when that file does not exist either.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return CrawlerConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return CrawlerConfig(**data)


__all__ = [
    "CrawlerConfig",
    "load_config",
    "ValidationError",
    "USER_AGENT_NAME",
    "DEFAULT_CRAWL_DELAY",
    "DEFAULT_TIMEOUT",
]
