#!/usr/bin/env python3
"""
Error taxonomy for model specifications.

Hard errors abort the requested change; the spec the caller holds is never
touched because every mutator is copy-on-write.  Protected engine arguments
are not errors: they are filtered and reported with a warning.
"""
from __future__ import annotations


class ModelSpecError(Exception):
    """Base class for all modelspec errors."""


class ValidationError(ModelSpecError, ValueError):
    """A value is outside its allowed set (mode, engine, model type)."""


class ArgumentError(ModelSpecError, TypeError):
    """Arguments have the wrong shape (none supplied, unknown keyword)."""


class ConfigurationError(ModelSpecError, ValueError):
    """The spec, registry or config cannot be used as requested."""


class ProtectedArgumentWarning(UserWarning):
    """Engine arguments that may not be set manually were removed."""


__all__ = [
    "ModelSpecError",
    "ValidationError",
    "ArgumentError",
    "ConfigurationError",
    "ProtectedArgumentWarning",
]
