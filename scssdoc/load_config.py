"""Logic for loading and merging configuration files."""

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from scssdoc.deep_merge import deep_merge
from scssdoc.errors import ScssDocError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict[str, Any] = {
    "groups": {"undefined": "General"},
    "default_group": "undefined",
    "autofill": ["requires", "throws", "content"],
    "access": ["public", "private"],
    "include_unknown_contexts": False,
    "private_prefix": "_",
    "reference_match": "prefer_type",
    "strict": False,
}

REFERENCE_MATCH_MODES = ("prefer_type", "exact_type")

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def snake_case_keys(config: dict[str, Any]) -> dict[str, Any]:
    """Normalize top-level camelCase keys (``privatePrefix``) to snake_case."""
    return {_CAMEL_RE.sub("_", key).lower(): value for key, value in config.items()}


def build_config(overrides: dict[str, Any] | None = None) -> dict[str, Any]:
    """Merge an in-memory configuration object with the defaults."""
    config = deep_merge(DEFAULT_CONFIG, snake_case_keys(overrides or {}))
    validate_config(config)
    return config


def validate_config(config: dict[str, Any]) -> None:
    """Reject values the run cannot work with."""
    if config["reference_match"] not in REFERENCE_MATCH_MODES:
        msg = (
            f"Invalid reference_match {config['reference_match']!r}, "
            f"expected one of {', '.join(REFERENCE_MATCH_MODES)}"
        )
        raise ScssDocError(msg)
    if not isinstance(config["groups"], dict):
        msg = "groups must be a mapping of group key to display name"
        raise ScssDocError(msg)
    config["default_group"] = str(config["default_group"]).lower()
    if config["default_group"] not in {key.lower() for key in config["groups"]}:
        config["groups"] = {config["default_group"]: "General", **config["groups"]}


def load_config(path: str | None = None) -> dict[str, Any]:
    """Load configuration from a YAML file and merge it with defaults."""
    user_config: dict[str, Any] = {}
    if path:
        p = Path(path)
        if p.exists():
            user_config = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
        else:
            logger.warning("Config file %s not found. Using defaults.", p)
    if not isinstance(user_config, dict):
        msg = f"Configuration in {path} must be a mapping"
        raise ScssDocError(msg)
    return build_config(user_config)
