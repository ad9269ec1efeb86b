#!/usr/bin/env python3
"""
Deferred argument values and data descriptors.

Some hyperparameters depend on the training data (e.g. ``mtry`` as a third
of the predictors) and cannot be known when the spec is written.  They are
stored as ``Deferred`` values and resolved against a ``DescriptorContext``
built from the data at fit time.

Usage:
    from modelspec.descriptors import preds, DescriptorContext

    mtry = preds() // 3
    ctx = DescriptorContext.from_data(X, y)
    mtry.resolve(ctx)        # -> int, or UNRESOLVED when n_preds is missing
"""
from __future__ import annotations

import inspect
import operator
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Tuple

import pandas as pd


# ============================================================================
# Resolution result
# ============================================================================

class _Unresolved:
    """Marker returned when a deferred value cannot be resolved yet."""

    _instance: Optional["_Unresolved"] = None

    def __new__(cls) -> "_Unresolved":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNRESOLVED"

    def __bool__(self) -> bool:
        return False


UNRESOLVED = _Unresolved()


def is_unresolved(value: Any) -> bool:
    return value is UNRESOLVED


# ============================================================================
# Argument values
# ============================================================================

@dataclass(frozen=True)
class Literal:
    """An explicitly tagged concrete value."""
    value: Any

    def resolve(self, context: Mapping[str, Any]) -> Any:
        return self.value


@dataclass(frozen=True, eq=False)
class Deferred:
    """
    A value computed from named descriptors once they are available.

    ``fn`` is called with one keyword per name in ``free_vars``.  When
    ``free_vars`` is not given it is read from ``fn``'s named parameters
    (``*args`` and ``**kwargs`` are ignored).
    """
    fn: Callable[..., Any]
    free_vars: Tuple[str, ...] = field(default=())
    label: str = ""

    def __post_init__(self):
        if not self.free_vars:
            named = (inspect.Parameter.POSITIONAL_OR_KEYWORD, inspect.Parameter.KEYWORD_ONLY)
            params = inspect.signature(self.fn).parameters.values()
            object.__setattr__(self, "free_vars", tuple(p.name for p in params if p.kind in named))
        if not self.label:
            object.__setattr__(self, "label", getattr(self.fn, "__name__", "expr"))

    def missing(self, context: Mapping[str, Any]) -> Tuple[str, ...]:
        """Descriptor names not bound in ``context``."""
        return tuple(v for v in self.free_vars if context.get(v) is None)

    def resolve(self, context: Mapping[str, Any]) -> Any:
        """Return the concrete value, or ``UNRESOLVED`` if a binding is missing."""
        if self.missing(context):
            return UNRESOLVED
        return self.fn(**{v: context[v] for v in self.free_vars})

    def map(self, func: Callable[[Any], Any], label: Optional[str] = None) -> "Deferred":
        """Deferred value of ``func`` applied to this one."""
        inner = self

        def _mapped(**kwargs):
            return func(inner.fn(**kwargs))

        return Deferred(_mapped, self.free_vars, label or f"{func.__name__}({self.label})")

    def _combine(self, other: Any, op: Callable[[Any, Any], Any], symbol: str,
                 reflected: bool = False) -> "Deferred":
        left = self
        if isinstance(other, Deferred):
            names = tuple(dict.fromkeys(left.free_vars + other.free_vars))

            def _both(**kwargs):
                a = left.fn(**{v: kwargs[v] for v in left.free_vars})
                b = other.fn(**{v: kwargs[v] for v in other.free_vars})
                return op(b, a) if reflected else op(a, b)

            return Deferred(_both, names, f"({left.label} {symbol} {other.label})")

        def _scalar(**kwargs):
            a = left.fn(**kwargs)
            return op(other, a) if reflected else op(a, other)

        text = f"({other!r} {symbol} {left.label})" if reflected else f"({left.label} {symbol} {other!r})"
        return Deferred(_scalar, left.free_vars, text)

    def __add__(self, other):
        return self._combine(other, operator.add, "+")

    def __radd__(self, other):
        return self._combine(other, operator.add, "+", reflected=True)

    def __sub__(self, other):
        return self._combine(other, operator.sub, "-")

    def __rsub__(self, other):
        return self._combine(other, operator.sub, "-", reflected=True)

    def __mul__(self, other):
        return self._combine(other, operator.mul, "*")

    def __rmul__(self, other):
        return self._combine(other, operator.mul, "*", reflected=True)

    def __truediv__(self, other):
        return self._combine(other, operator.truediv, "/")

    def __rtruediv__(self, other):
        return self._combine(other, operator.truediv, "/", reflected=True)

    def __floordiv__(self, other):
        return self._combine(other, operator.floordiv, "//")

    def __rfloordiv__(self, other):
        return self._combine(other, operator.floordiv, "//", reflected=True)

    def __pow__(self, other):
        return self._combine(other, operator.pow, "**")

    def __repr__(self) -> str:
        return f"Deferred({self.label})"


def resolve_value(value: Any, context: Mapping[str, Any]) -> Any:
    """Resolve one stored argument value; plain values pass through."""
    if isinstance(value, (Deferred, Literal)):
        return value.resolve(context)
    return value


def is_deferred(value: Any) -> bool:
    return isinstance(value, Deferred)


# ============================================================================
# Descriptor helpers
# ============================================================================

def _descriptor(name: str) -> Deferred:
    def _get(**kwargs):
        return kwargs[name]

    return Deferred(_get, (name,), name)


def obs() -> Deferred:
    """Number of training rows."""
    return _descriptor("n_obs")


def preds() -> Deferred:
    """Number of predictor columns before dummy expansion."""
    return _descriptor("n_preds")


def cols() -> Deferred:
    """Number of predictor columns after dummy expansion."""
    return _descriptor("n_cols")


def facts() -> Deferred:
    """Number of categorical predictors."""
    return _descriptor("n_facts")


def levels() -> Deferred:
    """Outcome class counts (classification only)."""
    return _descriptor("n_levels")


DESCRIPTOR_NAMES: Tuple[str, ...] = (
    "n_obs", "n_preds", "n_cols", "n_facts", "n_levels", "x", "y", "dat",
)


# ============================================================================
# Context
# ============================================================================

class DescriptorContext(Mapping[str, Any]):
    """
    Read-only mapping of descriptor name -> value.

    Names without a value are treated as unbound, so a context built
    without an outcome leaves ``n_levels`` deferred.
    """

    def __init__(self, values: Optional[Mapping[str, Any]] = None, **kwargs: Any):
        data: Dict[str, Any] = dict(values or {})
        data.update(kwargs)
        self._values = {k: v for k, v in data.items() if v is not None}

    @classmethod
    def from_data(cls, X: Any, y: Any = None, mode: Optional[str] = None) -> "DescriptorContext":
        """
        Compute descriptors from training data.

        Args:
            X: Predictors (DataFrame, or anything ``pandas.DataFrame`` accepts)
            y: Optional outcome (Series, array or DataFrame column)
            mode: Model mode; with "classification" any outcome dtype gets
                class counts (e.g. integer labels)

        Returns:
            DescriptorContext
        """
        X_df = X if isinstance(X, pd.DataFrame) else pd.DataFrame(X)
        categorical = [
            c for c in X_df.columns
            if isinstance(X_df[c].dtype, pd.CategoricalDtype)
            or pd.api.types.is_object_dtype(X_df[c])
            or pd.api.types.is_bool_dtype(X_df[c])
        ]
        n_cols = pd.get_dummies(X_df, columns=categorical).shape[1] if categorical else X_df.shape[1]

        n_levels = None
        dat = X_df
        if y is not None:
            y_s = y if isinstance(y, pd.Series) else pd.Series(y, name=".outcome")
            if (mode == "classification"
                    or isinstance(y_s.dtype, pd.CategoricalDtype)
                    or pd.api.types.is_object_dtype(y_s)
                    or pd.api.types.is_bool_dtype(y_s)):
                n_levels = y_s.value_counts(sort=False).to_dict()
            dat = X_df.assign(**{str(y_s.name or ".outcome"): y_s.to_numpy()})

        return cls(
            n_obs=int(X_df.shape[0]),
            n_preds=int(X_df.shape[1]),
            n_cols=int(n_cols),
            n_facts=len(categorical),
            n_levels=n_levels,
            x=X_df,
            y=y,
            dat=dat,
        )

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        shown = {k: v for k, v in self._values.items() if k not in ("x", "y", "dat")}
        return f"DescriptorContext({shown})"


EMPTY_CONTEXT = DescriptorContext()


__all__ = [
    "UNRESOLVED",
    "is_unresolved",
    "Literal",
    "Deferred",
    "resolve_value",
    "is_deferred",
    "obs",
    "preds",
    "cols",
    "facts",
    "levels",
    "DESCRIPTOR_NAMES",
    "DescriptorContext",
    "EMPTY_CONTEXT",
]
