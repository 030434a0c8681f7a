"""Read helpers for sabforge JSON/YAML settings files."""

from __future__ import annotations

import importlib.util
import json
from pathlib import Path
from typing import Any, Dict


def _load_yaml_module():
    if importlib.util.find_spec("yaml") is None:
        return None
    import yaml

    return yaml


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def read_artifact(path: Path) -> Dict[str, Any]:
    """Read a mapping from a JSON or YAML file depending on extension."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")
    if path.suffix.lower() in {".yml", ".yaml"}:
        yaml = _load_yaml_module()
        if yaml is None:
            raise ImportError("PyYAML is required to read YAML settings files.")
        try:
            payload = yaml.safe_load(_read_text(path))
        except yaml.YAMLError as exc:
            raise ValueError(f"Malformed YAML in {path}: {exc}") from exc
    else:
        payload = json.loads(_read_text(path))
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValueError(f"{path} must contain a mapping, got {type(payload).__name__}")
    return payload
