#!/usr/bin/env python3
"""
Model Specification.

A ``ModelSpec`` describes a model independently of the engine that will fit
it.  It is a value object: ``set_args``, ``set_mode``, ``update`` and
``set_engine`` return a new spec and never modify the one they are given.

Usage:
    from modelspec import mars, preds

    spec = mars().update(num_terms=5).set_mode("regression")
    spec = spec.set_args(prod_degree=2, thresh=preds() / 1000)
"""
from __future__ import annotations

import dataclasses
import logging
import warnings
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional

import pandas as pd

from .descriptors import EMPTY_CONTEXT, is_deferred, resolve_value, is_unresolved
from .errors import (
    ArgumentError,
    ConfigurationError,
    ProtectedArgumentWarning,
    ValidationError,
)
from .modes import Mode, check_mode
from .registry import (
    Method,
    engine_modes,
    get_engine,
    get_model_definition,
    list_engines,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Specification record
# ============================================================================

@dataclass(frozen=True)
class ModelSpec:
    """
    Engine-independent model specification.

    Attributes:
        model_type: Model family tag (fixed after creation)
        mode: One of ``ALL_MODES``
        args: Core argument name -> value, deferred value, or None (unset)
        eng_args: Engine argument name -> value or deferred value
        method: Bound translation metadata, None until an engine is bound
        engine: Engine name, if chosen
    """
    model_type: str
    mode: str = Mode.UNKNOWN.value
    args: Mapping[str, Any] = field(default_factory=dict)
    eng_args: Mapping[str, Any] = field(default_factory=dict)
    method: Optional[Method] = None
    engine: Optional[str] = None

    def __post_init__(self):
        core = get_model_definition(self.model_type).core_args
        extra = [k for k in self.args if k not in core]
        if extra:
            raise ArgumentError(
                f"'{self.model_type}' has no core arguments named {extra}. "
                f"Core arguments: {list(core)}"
            )
        object.__setattr__(self, "mode", check_mode(self.mode))
        object.__setattr__(self, "args", MappingProxyType({k: self.args.get(k) for k in core}))
        object.__setattr__(self, "eng_args", MappingProxyType(dict(self.eng_args)))

    def __reduce__(self):
        return (
            self.__class__,
            (self.model_type, self.mode, dict(self.args), dict(self.eng_args), self.method, self.engine),
        )

    @property
    def core_args(self) -> tuple:
        return get_model_definition(self.model_type).core_args

    @property
    def is_bound(self) -> bool:
        return self.method is not None

    def _replace(self, **changes: Any) -> "ModelSpec":
        return dataclasses.replace(self, **changes)

    # Chaining shortcuts; the module-level functions hold the logic.
    def set_args(self, **kwargs: Any) -> "ModelSpec":
        return set_args(self, **kwargs)

    def set_mode(self, mode: Any) -> "ModelSpec":
        return set_mode(self, mode)

    def set_engine(self, engine: str, **eng_args: Any) -> "ModelSpec":
        return set_engine(self, engine, **eng_args)

    def update(self, parameters: Any = None, fresh: bool = False, **kwargs: Any) -> "ModelSpec":
        return update(self, parameters, fresh=fresh, **kwargs)

    def __str__(self) -> str:
        return format_spec(self)


def new_model_spec(
    model_type: str,
    args: Mapping[str, Any],
    eng_args: Optional[Mapping[str, Any]] = None,
    mode: str = Mode.UNKNOWN.value,
    method: Optional[Method] = None,
    engine: Optional[str] = None,
) -> ModelSpec:
    """
    Build a spec for a registered model type.

    ``args`` may omit core arguments (they start unset) but may not add
    names outside the type's core set.
    """
    definition = get_model_definition(model_type)
    mode = check_mode(mode)
    if mode != Mode.UNKNOWN.value and mode not in definition.modes:
        legal = ", ".join(f"'{m}'" for m in definition.modes)
        raise ValidationError(f"'{model_type}' supports modes {legal}, got '{mode}'")
    if engine is not None and engine not in list_engines(model_type):
        raise ValidationError(
            f"Unknown engine '{engine}' for '{model_type}'. "
            f"Available: {list_engines(model_type)}"
        )
    return ModelSpec(
        model_type=model_type,
        mode=mode,
        args=args,
        eng_args=dict(eng_args or {}),
        method=method,
        engine=engine,
    )


def null_value(value: Any) -> bool:
    """True when an argument value means "unset"."""
    return value is None


# ============================================================================
# Mutators
# ============================================================================

def set_mode(spec: ModelSpec, mode: Any) -> ModelSpec:
    """
    Change the model's mode.

    ``None`` returns ``spec`` itself.  Only the first element of a sequence
    is used.

    Raises:
        ValidationError: if the mode is not in the allowlist
    """
    if mode is None:
        return spec
    mode = check_mode(mode)
    logger.debug("set_mode %s: %s -> %s", spec.model_type, spec.mode, mode)
    return spec._replace(mode=mode)


def set_args(spec: ModelSpec, **kwargs: Any) -> ModelSpec:
    """
    Set or replace arguments of a spec.

    Core argument names go to ``args``, any other name to ``eng_args``.
    Values are stored as given; deferred values stay unevaluated.  The bound
    method is dropped since the arguments changed.

    Raises:
        ArgumentError: if no arguments are passed
    """
    if not kwargs:
        raise ArgumentError("No arguments supplied; pass at least one named argument.")
    core = spec.core_args
    args = dict(spec.args)
    eng_args = dict(spec.eng_args)
    for name, value in kwargs.items():
        if name in core:
            args[name] = value
        else:
            eng_args[name] = value
    logger.debug("set_args %s: %s", spec.model_type, sorted(kwargs))
    return spec._replace(args=args, eng_args=eng_args, method=None)


def _parameters_to_dict(parameters: Any) -> Dict[str, Any]:
    if parameters is None:
        return {}
    if isinstance(parameters, pd.DataFrame):
        if len(parameters) != 1:
            raise ConfigurationError(
                f"`parameters` should have a single row, got {len(parameters)}"
            )
        return parameters.iloc[0].to_dict()
    if isinstance(parameters, pd.Series):
        return parameters.to_dict()
    if isinstance(parameters, Mapping):
        return dict(parameters)
    raise ConfigurationError(
        f"`parameters` should be a mapping or a single-row DataFrame, got {type(parameters).__name__}"
    )


def update(
    spec: ModelSpec,
    parameters: Any = None,
    fresh: bool = False,
    **kwargs: Any,
) -> ModelSpec:
    """
    Update core arguments of a spec.

    Args:
        spec: Spec to update
        parameters: Mapping (or single-row DataFrame) of core argument values.
            Engine arguments are not accepted here.
        fresh: Replace all core arguments; names not supplied become unset.
            Otherwise only supplied, non-None names are overwritten.
        **kwargs: Core argument values; these win over ``parameters``.

    Returns:
        New spec.  ``eng_args``, ``mode``, ``engine`` and ``method`` are kept.

    Raises:
        ConfigurationError: if ``parameters`` names a non-core argument
        ArgumentError: if a keyword is not a core argument
    """
    core = spec.core_args
    params = _parameters_to_dict(parameters)
    not_core = [k for k in params if k not in core]
    if not_core:
        raise ConfigurationError(
            f"At least one argument is not a main argument: {', '.join(map(str, not_core))}"
        )
    unknown = [k for k in kwargs if k not in core]
    if unknown:
        raise ArgumentError(
            f"update() got unexpected arguments for '{spec.model_type}': {', '.join(unknown)}. "
            f"Use set_args() for engine arguments."
        )
    supplied = {**params, **kwargs}

    if fresh:
        args = {name: supplied.get(name) for name in core}
    else:
        args = dict(spec.args)
        args.update({k: v for k, v in supplied.items() if not null_value(v)})
    logger.debug("update %s (fresh=%s): %s", spec.model_type, fresh, sorted(supplied))
    return spec._replace(args=args)


def set_engine(spec: ModelSpec, engine: str, **eng_args: Any) -> ModelSpec:
    """
    Choose the engine and its engine-specific arguments.

    The supplied engine arguments replace any existing ones.  The method is
    bound later, by ``bind_method``, once the mode is known.

    Raises:
        ValidationError: if the engine is not registered for the model type
    """
    available = list_engines(spec.model_type)
    if engine not in available:
        legal = ", ".join(f"'{e}'" for e in available)
        raise ValidationError(
            f"Engine '{engine}' is not available for '{spec.model_type}'; use one of {legal}"
        )
    return spec._replace(engine=engine, eng_args=dict(eng_args), method=None)


# ============================================================================
# Engine argument guard
# ============================================================================

def check_eng_args(
    args: Mapping[str, Any],
    protect: Iterable[str],
    core_args: Iterable[str],
) -> Dict[str, Any]:
    """
    Drop engine arguments that may not be set manually.

    Names in ``protect`` or ``core_args`` are removed and reported with a
    single ``ProtectedArgumentWarning``.  Never raises.
    """
    protected = set(protect) | set(core_args)
    common = [name for name in args if name in protected]
    if not common:
        return dict(args)
    warnings.warn(
        "The following arguments cannot be manually modified "
        f"and were removed: {', '.join(common)}.",
        ProtectedArgumentWarning,
        stacklevel=2,
    )
    return {k: v for k, v in args.items() if k not in protected}


# ============================================================================
# Binding
# ============================================================================

def bind_method(spec: ModelSpec) -> ModelSpec:
    """
    Attach the engine's translation metadata to a spec.

    An ``unknown`` mode is accepted when the engine supports exactly one
    mode for the model type.  Engine arguments that collide with protected
    or core names are removed.

    Raises:
        ConfigurationError: if no engine is set or the mode is ambiguous
    """
    if spec.engine is None:
        raise ConfigurationError(
            f"No engine set for '{spec.model_type}'. "
            f"Use set_engine() with one of {list_engines(spec.model_type)}"
        )
    mode = spec.mode
    if mode == Mode.UNKNOWN.value:
        modes = engine_modes(spec.model_type, spec.engine)
        if len(modes) != 1:
            raise ConfigurationError(
                f"Model code depends on the mode; please specify one of {modes} with set_mode()"
            )
        mode = modes[0]
    method = get_engine(spec.model_type, spec.engine, mode).to_method()
    eng_args = check_eng_args(spec.eng_args, method.protect, spec.core_args)
    logger.debug("Bound %s to %s (%s)", spec.model_type, method.fit.path, mode)
    return spec._replace(mode=mode, eng_args=eng_args, method=method)


# ============================================================================
# Descriptor evaluation
# ============================================================================

def maybe_eval(value: Any, context: Optional[Mapping[str, Any]] = None) -> Any:
    """
    Resolve a value if possible, else return it unchanged.

    Missing descriptors and errors raised by the expression both leave the
    value deferred; ``FitCall.build`` rejects whatever is still deferred.
    """
    try:
        resolved = resolve_value(value, EMPTY_CONTEXT if context is None else context)
    except Exception as e:
        logger.debug("Could not evaluate %r (%s); keeping it deferred", value, e)
        return value
    if is_unresolved(resolved):
        return value
    return resolved


def eval_args(spec: ModelSpec, context: Optional[Mapping[str, Any]] = None) -> ModelSpec:
    """
    Resolve every argument that can be resolved against ``context``.

    Entries whose descriptors are not bound stay deferred.
    """
    args = {k: maybe_eval(v, context) for k, v in spec.args.items()}
    eng_args = {k: maybe_eval(v, context) for k, v in spec.eng_args.items()}
    return spec._replace(args=args, eng_args=eng_args)


def has_descriptors(spec: ModelSpec) -> bool:
    """True if any argument is still deferred."""
    return any(is_deferred(v) for v in list(spec.args.values()) + list(spec.eng_args.values()))


# ============================================================================
# Printing
# ============================================================================

def _format_args(values: Mapping[str, Any]) -> List[str]:
    return [f"  {k} = {v!r}" for k, v in values.items() if not null_value(v)]


def format_spec(spec: ModelSpec) -> str:
    """Human-readable summary of a spec."""
    title = get_model_definition(spec.model_type).title
    lines = [f"{title} Model Specification ({spec.mode})", ""]
    main = _format_args(spec.args)
    if main:
        lines += ["Main Arguments:"] + main + [""]
    eng = _format_args(spec.eng_args)
    if eng:
        lines += ["Engine-Specific Arguments:"] + eng + [""]
    if spec.engine is not None:
        lines.append(f"Computational engine: {spec.engine}")
    return "\n".join(lines).rstrip() + "\n"


__all__ = [
    "ModelSpec",
    "new_model_spec",
    "null_value",
    "set_mode",
    "set_args",
    "update",
    "set_engine",
    "check_eng_args",
    "bind_method",
    "maybe_eval",
    "eval_args",
    "has_descriptors",
    "format_spec",
]
