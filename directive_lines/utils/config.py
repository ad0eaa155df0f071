from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any, Dict

from .structured_data import load_structured_file

DEFAULT_CONFIG_PATH = Path("directive-lines.yaml")

DEFAULT_CONFIG: Dict[str, Any] = {
    "rules": {
        "lines-around-directive": "always",
    },
    "source": {
        "source_type": "auto",
        "extensions": [".js", ".cjs", ".mjs"],
    },
    "output": {
        "format": "text",
    },
}

RULE_OFF = "off"
OUTPUT_FORMATS = {"text", "json"}
SOURCE_TYPE_MODES = {"auto", "script", "module"}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            # per-rule options are replaced whole, never merged key by key
            if key == "rules":
                result[key] = {**result[key], **value}
            else:
                result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config(config_path: Path = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    config = dict(DEFAULT_CONFIG)
    if config_path.exists():
        user_config = load_structured_file(config_path)
        if user_config is None:
            user_config = {}
        if not isinstance(user_config, dict):
            raise RuntimeError(f"Config file {config_path} must contain a mapping/object.")
        config = _deep_merge(config, user_config)

    for section in ("rules", "source", "output"):
        if not isinstance(config.get(section), dict):
            raise RuntimeError(f"Config section '{section}' in {config_path} must be a mapping/object.")

    output_format = config.get("output", {}).get("format")
    if output_format not in OUTPUT_FORMATS:
        raise RuntimeError(
            f"output.format must be one of: {', '.join(sorted(OUTPUT_FORMATS))}"
        )
    source_type = config.get("source", {}).get("source_type")
    if source_type not in SOURCE_TYPE_MODES:
        raise RuntimeError(
            f"source.source_type must be one of: {', '.join(sorted(SOURCE_TYPE_MODES))}"
        )
    return config


def config_hash(config: Dict[str, Any]) -> str:
    canonical = json.dumps(config, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
