from __future__ import annotations

"""
Configuration Validation Service.

Normalizes untrusted configuration input (persisted JSON or CLI overrides)
into strictly typed settings, filling missing keys with domain defaults.
"""

import logging
from typing import Any, Dict, List, Tuple

from portfoliotree.domain.config import get_default_config
from portfoliotree.infra.logging.config import _LEVEL_MAP

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize the provided configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raise TypeError on mismatches instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: Normalized configuration and the
                                          list of warnings produced.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    merged["data_path"] = _as_str(
        merged.get("data_path"), defaults["data_path"], "data_path", warnings, strict
    )
    merged["initial_expanded"] = _as_id_list(
        merged.get("initial_expanded"), defaults["initial_expanded"],
        "initial_expanded", warnings, strict
    )
    merged["log_to_file"] = _as_bool(
        merged.get("log_to_file"), defaults["log_to_file"], "log_to_file", warnings, strict
    )

    level = _as_str(merged.get("log_level"), defaults["log_level"], "log_level", warnings, strict)
    if level.upper() not in _LEVEL_MAP:
        _reject(f"Invalid field 'log_level': unknown level '{level}'.", warnings, strict, ValueError)
        level = defaults["log_level"]
    merged["log_level"] = level.upper()

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

_TRUE_WORDS = ("1", "true", "yes", "on")
_FALSE_WORDS = ("0", "false", "no", "off")


def _reject(msg: str, warnings: List[str], strict: bool, exc: type = TypeError) -> None:
    """Raise in strict mode, otherwise record the fallback warning."""
    if strict:
        raise exc(msg)
    warnings.append(f"{msg} Using fallback.")


def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    if value is None:
        return fallback
    if isinstance(value, str):
        return value.strip() or fallback
    _reject(f"Invalid field '{field}': expected str, received {type(value).__name__}.", warnings, strict)
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    if value is None:
        return fallback
    if isinstance(value, bool):
        return value
    word = value.strip().lower() if isinstance(value, str) else None
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    _reject(f"Invalid field '{field}': expected bool, received {value!r}.", warnings, strict)
    return fallback


def _as_id_list(
        value: Any,
        fallback: List[str],
        field: str,
        warnings: List[str],
        strict: bool
) -> List[str]:
    """Node ids as a list or a comma-separated string; order kept, duplicates removed."""
    if value is None:
        return list(fallback)
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = [str(x) for x in value]
    else:
        _reject(
            f"Invalid field '{field}': expected list of node ids, received {type(value).__name__}.",
            warnings, strict,
        )
        return list(fallback)

    ids: List[str] = []
    for item in items:
        node_id = item.strip()
        if node_id and node_id not in ids:
            ids.append(node_id)
    return ids
