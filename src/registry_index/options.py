"""Decoder options and their configuration sources.

Precedence (highest first): explicit keyword overrides, the
``REGINDEX_STRICT`` environment variable, the ``decoder:`` section of the
YAML config file, built-in defaults.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from constants import Constants, _load_yaml_config

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass(frozen=True)
class DecodeOptions:
    """Caller-selected decoding behavior."""
    reject_unknown_schema: bool = False
    max_workers: int = Constants.BATCH_MAX_WORKERS

    @classmethod
    def from_config(cls, path: Optional[str] = None, **overrides: Any) -> "DecodeOptions":
        """Build options from YAML config, environment and overrides.

        Invalid values are logged and ignored rather than raised.
        """
        options = cls()
        section = _load_yaml_config(path).get("decoder")
        if isinstance(section, dict):
            options = _apply_section(options, section)
        elif section is not None:
            logger.warning("Ignoring 'decoder' config section: expected a mapping")

        env_strict = os.environ.get(Constants.ENV_STRICT)
        if env_strict is not None and env_strict.strip():
            flag = _parse_bool(env_strict)
            if flag is None:
                logger.warning("Ignoring %s=%r: not a boolean", Constants.ENV_STRICT, env_strict)
            else:
                options = replace(options, reject_unknown_schema=flag)

        overrides = {k: v for k, v in overrides.items() if v is not None}
        if overrides:
            options = replace(options, **overrides)
        return options


def _parse_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    return None


def _apply_section(options: DecodeOptions, section: Dict[str, Any]) -> DecodeOptions:
    changes: Dict[str, Any] = {}
    if "reject_unknown_schema" in section:
        flag = _parse_bool(section["reject_unknown_schema"])
        if flag is None:
            logger.warning("Ignoring decoder.reject_unknown_schema: not a boolean")
        else:
            changes["reject_unknown_schema"] = flag
    if "max_workers" in section:
        try:
            workers = int(section["max_workers"])
        except (TypeError, ValueError):
            workers = 0
        if workers < 1:
            logger.warning("Ignoring decoder.max_workers: expected a positive integer")
        else:
            changes["max_workers"] = workers
    return replace(options, **changes) if changes else options
