from __future__ import annotations

"""
Configuration Validation Service.

Gatekeeper for the analysis run: ensures the configuration dictionary
conforms to the expected schema, coercing loose inputs (CLI strings, JSON
numbers) and injecting defaults for missing or malformed keys.
"""

import logging
from typing import Any, Dict, List, Sequence, Tuple

from memoguard.core.pipeline.components.filters import (
    default_exclude_patterns,
    default_extensions,
    default_include_patterns,
)
from memoguard.domain.config import POLICIES, REPORT_FORMATS, UNRESOLVED_MODES, get_default_config

logger = logging.getLogger(__name__)

_MAX_WORKERS_LIMIT = 64


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
        strict: If True, raises exceptions on type mismatch instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: The normalized configuration and
                                          a list of warnings.

    Raises:
        TypeError: In strict mode, on a field of the wrong type.
        ValueError: In strict mode, on an unknown enum value.
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

    string_fields = ["input_path", "report_path", "version"]
    bool_fields = ["respect_gitignore"]
    enum_fields = {
        "policy": POLICIES,
        "unresolved": UNRESOLVED_MODES,
        "report_format": REPORT_FORMATS,
    }
    list_fields_map = {
        "extensions": default_extensions(),
        "include_patterns": default_include_patterns(),
        "exclude_patterns": default_exclude_patterns(),
        "component_decorators": defaults["component_decorators"],
        "element_modules": defaults["element_modules"],
        "element_types": defaults["element_types"],
        "element_factories": defaults["element_factories"],
    }

    for field in string_fields:
        merged[field] = _as_str(merged.get(field), defaults.get(field, ""), field, warnings, strict)

    for field in bool_fields:
        merged[field] = _as_bool(merged.get(field), defaults.get(field, False), field, warnings, strict)

    for field, choices in enum_fields.items():
        merged[field] = _as_choice(merged.get(field), defaults[field], choices, field, warnings, strict)

    for field, fallback in list_fields_map.items():
        merged[field] = _as_list_str(merged.get(field), fallback, field, warnings, strict)

    merged["max_workers"] = _as_positive_int(
        merged.get("max_workers"), defaults["max_workers"], "max_workers", warnings, strict
    )

    merged["extensions"] = _normalize_extensions(merged["extensions"], warnings, strict)

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_choice(
        value: Any,
        fallback: str,
        choices: Sequence[str],
        field: str,
        warnings: List[str],
        strict: bool,
) -> str:
    """Normalize an enum-like string field (case and underscores are forgiven)."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip().lower().replace("_", "-")
        if v in choices:
            return v
        msg = f"Invalid value for '{field}': '{value}'. Expected one of {', '.join(choices)}."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using '{fallback}'.")
        return fallback

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using '{fallback}'.")
    return fallback


def _as_list_str(value: Any, fallback: List[str], field: str, warnings: List[str], strict: bool) -> List[str]:
    """Ensure input is a list of sanitized strings, supporting CSV parsing."""
    if value is None:
        return list(fallback)

    if isinstance(value, str) and not strict:
        items = [x.strip() for x in value.split(",") if x.strip()]
        if items:
            warnings.append(f"Field '{field}' converted from CSV string to list.")
            return items
        return list(fallback)

    if isinstance(value, list):
        out: List[str] = []
        for i, item in enumerate(value):
            if isinstance(item, str):
                s = item.strip()
                if s:
                    out.append(s)
            else:
                msg = f"Invalid item in '{field}[{i}]': expected str."
                if strict:
                    raise TypeError(msg)
                warnings.append(f"{msg} Item discarded.")
        return out if out else list(fallback)

    msg = f"Invalid field '{field}': expected list[str], received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return list(fallback)


def _as_positive_int(value: Any, fallback: int, field: str, warnings: List[str], strict: bool) -> int:
    if value is None:
        return fallback
    if isinstance(value, bool):
        msg = f"Invalid field '{field}': expected int, received bool."
    elif isinstance(value, int):
        if 1 <= value <= _MAX_WORKERS_LIMIT:
            return value
        msg = f"Invalid field '{field}': {value} is outside 1..{_MAX_WORKERS_LIMIT}."
    elif isinstance(value, str) and value.strip().isdigit() and not strict:
        warnings.append(f"Field '{field}' converted from '{value}' to int.")
        return _as_positive_int(int(value.strip()), fallback, field, warnings, strict)
    else:
        msg = f"Invalid field '{field}': expected int, received {type(value).__name__}."

    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: DOMAIN NORMALIZATION
# -----------------------------------------------------------------------------

def _normalize_extensions(exts: List[str], warnings: List[str], strict: bool) -> List[str]:
    """Ensure all file extensions are prefixed with a dot."""
    out: List[str] = []
    for ext in exts:
        e = ext.strip()
        if not e:
            continue
        if not e.startswith("."):
            if strict:
                raise ValueError(f"Invalid extension '{ext}': must start with '.'.")
            warnings.append(f"Extension '{ext}' corrected to '.{e}'.")
            e = "." + e
        out.append(e)
    return out if out else default_extensions()
