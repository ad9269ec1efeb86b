#!/usr/bin/env python3
"""
Model modes.

The allowlist is fixed at import time; there is no way to add a mode at
runtime.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Sequence, Tuple

from .errors import ValidationError


class Mode(str, Enum):
    """Supervised-learning task a specification targets."""
    UNKNOWN = "unknown"
    CLASSIFICATION = "classification"
    REGRESSION = "regression"
    CENSORED_REGRESSION = "censored regression"


ALL_MODES: Tuple[str, ...] = tuple(m.value for m in Mode)


def _first(mode: Any) -> Any:
    # Only the first element of a sequence is used
    if isinstance(mode, (list, tuple)):
        return mode[0] if mode else None
    return mode


def check_mode(mode: Any, allowed: Optional[Sequence[str]] = None) -> str:
    """
    Validate a mode value and return it as a plain string.

    Args:
        mode: Mode string, ``Mode`` member, or a sequence of them
        allowed: Restrict to these modes (default: the global allowlist)

    Returns:
        The validated mode string

    Raises:
        ValidationError: if the mode is not allowed
    """
    allowed = tuple(allowed) if allowed is not None else ALL_MODES
    value = _first(mode)
    if isinstance(value, Mode):
        value = value.value
    if value not in allowed:
        legal = ", ".join(f"'{m}'" for m in allowed)
        raise ValidationError(f"`mode` should be one of {legal}, got {value!r}")
    return value


__all__ = ["Mode", "ALL_MODES", "check_mode"]
