from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Any, Dict

import yaml

from docscrap.models.configs import ScrapeConfig


SCRAPE_TABLE = "scrape"


def _load_structured_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    ext = path.suffix.lower()
    text = path.read_text(encoding="utf-8")

    if ext in {".yaml", ".yml"}:
        data = yaml.safe_load(text)
    elif ext == ".toml":
        data = tomllib.loads(text)
    elif ext == ".json":
        data = json.loads(text)
    else:
        raise ValueError(f"Unsupported config format '{ext}' for {path} (use .yaml, .toml or .json)")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping at the top level")
    return data


def load_scrape_config(path: Path) -> ScrapeConfig:
    """Load scrape settings, either at the top level or under a ``scrape`` table.

    Relative ``output_dir`` and ``sqlite_db`` paths resolve against the config
    file's directory.
    """

    path = Path(path)
    raw = _load_structured_file(path)
    section = raw.get(SCRAPE_TABLE)
    if isinstance(section, dict):
        raw = section
    config = ScrapeConfig.model_validate(raw)
    return config.resolve_paths(path.parent)


__all__ = ["SCRAPE_TABLE", "load_scrape_config"]
