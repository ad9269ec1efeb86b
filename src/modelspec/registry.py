#!/usr/bin/env python3
"""
Model and engine registry.

Each model family registers its core (standardized) arguments and the modes
it supports; each engine registers, per mode, the estimator to call and the
table translating core names to the estimator's own names.

The registry is filled at import time by ``modelspec.models``; the
specification layer only reads from it.
"""
from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from .errors import ConfigurationError, ValidationError
from .modes import ALL_MODES, Mode

logger = logging.getLogger(__name__)

# Data arguments of an sklearn-style ``fit`` call; never settable as engine args
DEFAULT_DATA_ARGS: Tuple[str, ...] = ("X", "y", "sample_weight")


# ============================================================================
# Definitions
# ============================================================================

@dataclass(frozen=True)
class FitTemplate:
    """How to call an engine: estimator import path plus engine defaults."""
    module: str
    func: str
    defaults: Mapping[str, Any] = field(default_factory=dict)
    data_args: Tuple[str, ...] = DEFAULT_DATA_ARGS

    def __post_init__(self):
        object.__setattr__(self, "defaults", MappingProxyType(dict(self.defaults)))
        object.__setattr__(self, "data_args", tuple(self.data_args))

    def __reduce__(self):
        return (self.__class__, (self.module, self.func, dict(self.defaults), self.data_args))

    @property
    def path(self) -> str:
        return f"{self.module}.{self.func}"

    def load(self) -> Callable[..., Any]:
        """Import and return the estimator class."""
        module = importlib.import_module(self.module)
        return getattr(module, self.func)


@dataclass(frozen=True)
class Method:
    """Translation metadata bound to a spec once engine and mode are known."""
    engine: str
    mode: str
    fit: FitTemplate
    arg_translation: Mapping[str, str] = field(default_factory=dict)
    protect: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "arg_translation", MappingProxyType(dict(self.arg_translation)))
        object.__setattr__(self, "protect", tuple(self.protect))

    def __reduce__(self):
        return (self.__class__, (self.engine, self.mode, self.fit, dict(self.arg_translation), self.protect))


@dataclass(frozen=True)
class ModelDefinition:
    """A model family: its core arguments and supported modes."""
    model_type: str
    core_args: Tuple[str, ...]
    modes: Tuple[str, ...]
    description: str = ""

    @property
    def title(self) -> str:
        return self.description or self.model_type.replace("_", " ").title()


@dataclass(frozen=True)
class EngineDefinition:
    """One (model type, engine, mode) entry."""
    model_type: str
    engine: str
    mode: str
    fit: FitTemplate
    arg_translation: Mapping[str, str]
    protect: Tuple[str, ...] = ()
    optional_dependency: Optional[str] = None

    def __reduce__(self):
        return (self.__class__, (self.model_type, self.engine, self.mode, self.fit,
                                 dict(self.arg_translation), self.protect, self.optional_dependency))

    def to_method(self) -> Method:
        # Engine names that core arguments translate to are set through the core arguments
        translated = tuple(self.arg_translation.values())
        protect = tuple(dict.fromkeys(self.fit.data_args + self.protect + translated))
        return Method(
            engine=self.engine,
            mode=self.mode,
            fit=self.fit,
            arg_translation=self.arg_translation,
            protect=protect,
        )


MODEL_REGISTRY: Dict[str, ModelDefinition] = {}
ENGINE_REGISTRY: Dict[Tuple[str, str, str], EngineDefinition] = {}


# ============================================================================
# Registration
# ============================================================================

def register_model(
    model_type: str,
    core_args: Sequence[str],
    modes: Sequence[str],
    description: str = "",
) -> ModelDefinition:
    """
    Register a model family.

    Raises:
        ConfigurationError: if the type is already registered or a mode is
            not in the global allowlist
    """
    if model_type in MODEL_REGISTRY:
        raise ConfigurationError(f"Model type '{model_type}' is already registered")
    bad = [m for m in modes if m not in ALL_MODES or m == Mode.UNKNOWN.value]
    if bad:
        raise ConfigurationError(f"Model type '{model_type}' declares invalid modes: {bad}")
    definition = ModelDefinition(
        model_type=model_type,
        core_args=tuple(core_args),
        modes=tuple(modes),
        description=description,
    )
    MODEL_REGISTRY[model_type] = definition
    logger.debug("Registered model type %s (args=%s)", model_type, definition.core_args)
    return definition


def register_engine(
    model_type: str,
    engine: str,
    mode: str,
    fit: FitTemplate,
    arg_translation: Mapping[str, str],
    protect: Sequence[str] = (),
    optional_dependency: Optional[str] = None,
) -> EngineDefinition:
    """
    Register an engine for one mode of a model family.

    Args:
        model_type: Registered model type
        engine: Engine name (e.g. "sklearn", "lightgbm")
        mode: Mode the engine fits for this type
        fit: Estimator call template
        arg_translation: Core argument name -> engine argument name.
            Core arguments missing from the table are unsupported by the engine.
        protect: Extra engine argument names users may not set
        optional_dependency: Package to install when the engine is missing
    """
    definition = get_model_definition(model_type)
    if mode not in definition.modes:
        raise ConfigurationError(
            f"Mode '{mode}' is not supported by '{model_type}'. Available: {list(definition.modes)}"
        )
    unknown = [k for k in arg_translation if k not in definition.core_args]
    if unknown:
        raise ConfigurationError(
            f"Translation for '{model_type}' engine '{engine}' uses non-core arguments: {unknown}"
        )
    key = (model_type, engine, mode)
    if key in ENGINE_REGISTRY:
        raise ConfigurationError(f"Engine '{engine}' for '{model_type}' ({mode}) is already registered")
    entry = EngineDefinition(
        model_type=model_type,
        engine=engine,
        mode=mode,
        fit=fit,
        arg_translation=MappingProxyType(dict(arg_translation)),
        protect=tuple(protect),
        optional_dependency=optional_dependency,
    )
    ENGINE_REGISTRY[key] = entry
    logger.debug("Registered engine %s for %s (%s) -> %s", engine, model_type, mode, fit.path)
    return entry


# ============================================================================
# Lookup helpers
# ============================================================================

def get_model_definition(model_type: str) -> ModelDefinition:
    """Get a model family by type tag."""
    if model_type not in MODEL_REGISTRY:
        raise ValidationError(
            f"Unknown model type: {model_type}. "
            f"Available: {list(MODEL_REGISTRY.keys())}"
        )
    return MODEL_REGISTRY[model_type]


def get_core_args(model_type: str) -> Tuple[str, ...]:
    """Core argument names of a model family."""
    return get_model_definition(model_type).core_args


def list_models() -> List[str]:
    """All registered model types."""
    return list(MODEL_REGISTRY.keys())


def list_engines(model_type: str, mode: Optional[str] = None) -> List[str]:
    """Engines registered for a model type (optionally for one mode)."""
    get_model_definition(model_type)
    engines = [
        e.engine for e in ENGINE_REGISTRY.values()
        if e.model_type == model_type and (mode is None or e.mode == mode)
    ]
    return list(dict.fromkeys(engines))


def get_engine(model_type: str, engine: str, mode: str) -> EngineDefinition:
    """Get the engine entry for a (type, engine, mode) triple."""
    key = (model_type, engine, mode)
    if key not in ENGINE_REGISTRY:
        modes = [e.mode for e in ENGINE_REGISTRY.values()
                 if e.model_type == model_type and e.engine == engine]
        raise ConfigurationError(
            f"Engine '{engine}' has no '{mode}' mode for '{model_type}'. "
            f"Available modes: {modes}"
        )
    return ENGINE_REGISTRY[key]


def engine_modes(model_type: str, engine: str) -> List[str]:
    """Modes an engine supports for a model type."""
    return [e.mode for e in ENGINE_REGISTRY.values()
            if e.model_type == model_type and e.engine == engine]


def check_engine_available(model_type: str, engine: str, mode: str) -> bool:
    """Check if the engine's estimator can be imported (deps present)."""
    try:
        get_engine(model_type, engine, mode).fit.load()
        return True
    except (ConfigurationError, ImportError, AttributeError):
        return False


def show_engines(model_type: str) -> pd.DataFrame:
    """Engine/mode table for a model type."""
    get_model_definition(model_type)
    rows = [
        {
            "engine": e.engine,
            "mode": e.mode,
            "estimator": e.fit.path,
            "optional_dependency": e.optional_dependency,
        }
        for e in ENGINE_REGISTRY.values()
        if e.model_type == model_type
    ]
    return pd.DataFrame(rows, columns=["engine", "mode", "estimator", "optional_dependency"])


def get_model_info(model_type: str) -> Dict[str, Any]:
    """Get metadata for a model type."""
    definition = get_model_definition(model_type)
    return {
        "model_type": definition.model_type,
        "title": definition.title,
        "core_args": list(definition.core_args),
        "modes": list(definition.modes),
        "engines": list_engines(model_type),
    }


__all__ = [
    "DEFAULT_DATA_ARGS",
    "FitTemplate",
    "Method",
    "ModelDefinition",
    "EngineDefinition",
    "MODEL_REGISTRY",
    "ENGINE_REGISTRY",
    "register_model",
    "register_engine",
    "get_model_definition",
    "get_core_args",
    "list_models",
    "list_engines",
    "get_engine",
    "engine_modes",
    "check_engine_available",
    "show_engines",
    "get_model_info",
]
