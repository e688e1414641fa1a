from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .model import LANGUAGES, TYPESCRIPT

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".srcmd.yaml"
CONFIG_ENV = "SRCMD_CONFIG"


@dataclass
class Config:
    """Tool settings read from ``.srcmd.yaml``.

    language: default language for new notebooks and Jupyter imports.
    id_bytes: entropy bytes per generated cell id.
    strict: treat lint warnings as failures.
    """

    language: str = TYPESCRIPT
    id_bytes: int = 8
    strict: bool = False
    log_level: str = "WARNING"
    log_format: str = "simple"


def _config_path(path: Optional[str]) -> Optional[Path]:
    if path:
        return Path(path)
    env = os.getenv(CONFIG_ENV)
    if env:
        return Path(env)
    local = Path.cwd() / CONFIG_FILENAME
    return local if local.exists() else None


def config_from_mapping(data: dict) -> Config:
    cfg = Config()
    known = {f.name for f in fields(Config)}
    for key, value in data.items():
        if key not in known:
            logger.warning("Ignoring unknown config key: %s", key)
            continue
        setattr(cfg, key, value)

    if cfg.language not in LANGUAGES:
        raise ValueError(f"config: language must be one of {', '.join(LANGUAGES)}, got {cfg.language!r}")
    if isinstance(cfg.id_bytes, bool) or not isinstance(cfg.id_bytes, int) or cfg.id_bytes < 1:
        raise ValueError(f"config: id_bytes must be a positive integer, got {cfg.id_bytes!r}")
    if not isinstance(cfg.strict, bool):
        raise ValueError(f"config: strict must be true or false, got {cfg.strict!r}")
    cfg.log_level = str(cfg.log_level).upper()
    cfg.log_format = str(cfg.log_format)
    return cfg


def load_config(path: Optional[str] = None) -> Config:
    """Load settings from an explicit path, $SRCMD_CONFIG or ./.srcmd.yaml."""
    p = _config_path(path)
    data: dict = {}
    if p is not None:
        yaml = YAML(typ="safe")
        try:
            loaded = yaml.load(p.read_text(encoding="utf-8"))
        except OSError as e:
            raise ValueError(f"config: cannot read {p}: {e}") from e
        except YAMLError as e:
            raise ValueError(f"config: cannot parse {p}: {e}") from e
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ValueError(f"config: {p} must contain a mapping")
        data = loaded
        logger.debug("Loaded config from %s", p)

    cfg = config_from_mapping(data)
    env_level = os.getenv("SRCMD_LOG_LEVEL")
    if env_level:
        cfg.log_level = env_level.upper()
    return cfg
