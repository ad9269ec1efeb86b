#!/usr/bin/env python3
"""
Translation of a model spec into an engine call.

Core arguments are renamed through the bound method's table and merged with
the engine defaults and the (guarded) engine arguments:

    engine defaults  <  translated core args  <  engine args
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping

from .descriptors import is_deferred
from .errors import ConfigurationError
from .registry import FitTemplate
from .spec import ModelSpec, bind_method, check_eng_args, null_value

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FitCall:
    """A fully translated engine call, ready to instantiate."""
    model_type: str
    engine: str
    mode: str
    fit: FitTemplate
    args: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "args", MappingProxyType(dict(self.args)))

    def __reduce__(self):
        return (self.__class__, (self.model_type, self.engine, self.mode, self.fit, dict(self.args)))

    @property
    def unresolved(self) -> List[str]:
        """Engine argument names whose value is still deferred."""
        return [k for k, v in self.args.items() if is_deferred(v)]

    def load(self) -> Callable[..., Any]:
        return self.fit.load()

    def build(self) -> Any:
        """
        Instantiate the engine estimator with the translated arguments.

        Raises:
            ConfigurationError: if an argument is still deferred
        """
        pending = self.unresolved
        if pending:
            raise ConfigurationError(
                f"Arguments of {self.fit.path} depend on data descriptors that were "
                f"never resolved: {', '.join(pending)}"
            )
        estimator_cls = self.load()
        return estimator_cls(**self.args)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "model_type": self.model_type,
            "engine": self.engine,
            "mode": self.mode,
            "estimator": self.fit.path,
            "args": {k: (repr(v) if is_deferred(v) else v) for k, v in self.args.items()},
        }


def translate_args(spec: ModelSpec) -> Dict[str, Any]:
    """
    Rename the set core arguments of a bound spec to engine names.

    Unset arguments are skipped.  Arguments the engine has no counterpart
    for are dropped with a logged warning.
    """
    if spec.method is None:
        raise ConfigurationError(f"'{spec.model_type}' spec has no bound method")
    table = spec.method.arg_translation
    translated: Dict[str, Any] = {}
    for name, value in spec.args.items():
        if null_value(value):
            continue
        if name not in table:
            logger.warning(
                "Argument '%s' is not used by engine '%s' for %s and was ignored",
                name, spec.engine, spec.model_type,
            )
            continue
        translated[table[name]] = value
    return translated


def translate(spec: ModelSpec) -> FitCall:
    """
    Translate a spec into a ``FitCall``.

    The spec is (re)bound first unless its method matches its mode.  Deferred values are carried through
    unchanged; run ``eval_args`` beforehand to resolve them.
    """
    current = spec.method is not None and spec.method.mode == spec.mode
    bound = spec if current else bind_method(spec)
    method = bound.method
    eng_args = check_eng_args(bound.eng_args, method.protect, bound.core_args)

    args: Dict[str, Any] = dict(method.fit.defaults)
    args.update(translate_args(bound))
    args.update(eng_args)
    logger.debug("Translated %s -> %s(%s)", bound.model_type, method.fit.path, sorted(args))
    return FitCall(
        model_type=bound.model_type,
        engine=method.engine,
        mode=method.mode,
        fit=method.fit,
        args=args,
    )


__all__ = ["FitCall", "translate_args", "translate"]
