#!/usr/bin/env python3
"""
Fit dispatch.

Binds the engine, resolves data descriptors against the training data,
translates the arguments and fits the engine estimator.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, List, Optional

import pandas as pd

from .descriptors import DescriptorContext
from .registry import get_engine
from .spec import ModelSpec, bind_method, eval_args
from .translate import FitCall, translate

logger = logging.getLogger(__name__)


@dataclass
class ModelFit:
    """A spec together with the fitted engine estimator."""
    spec: ModelSpec
    call: FitCall
    fit: Any
    elapsed: float = 0.0
    feature_names: List[str] = field(default_factory=list)

    @property
    def engine(self) -> Optional[str]:
        return self.spec.engine


def fit_xy(spec: ModelSpec, X: Any, y: Any, **fit_kwargs: Any) -> ModelFit:
    """
    Fit a spec on predictors ``X`` and outcome ``y``.

    Args:
        spec: Spec with an engine set
        X: Predictors
        y: Outcome
        **fit_kwargs: Passed to the estimator's ``fit`` (e.g. sample_weight)

    Returns:
        ModelFit

    Raises:
        ConfigurationError: if the spec cannot be bound or descriptors remain
        ImportError: if the engine's package is not installed
    """
    bound = bind_method(spec)
    X_df = X if isinstance(X, pd.DataFrame) else pd.DataFrame(X)
    context = DescriptorContext.from_data(X_df, y, mode=bound.mode)
    resolved = eval_args(bound, context)
    call = translate(resolved)

    try:
        estimator = call.build()
    except ImportError as e:
        dependency = get_engine(call.model_type, call.engine, call.mode).optional_dependency
        if dependency is None:
            raise
        raise ImportError(
            f"Engine '{call.engine}' for {call.model_type} requires '{dependency}' "
            f"(pip install {dependency})"
        ) from e

    logger.info(
        "[%s] Fitting %s on %s rows x %s predictors",
        call.model_type, call.fit.path, f"{len(X_df):,}", X_df.shape[1],
    )
    start = time.perf_counter()
    estimator.fit(X_df, y, **fit_kwargs)
    elapsed = time.perf_counter() - start
    logger.info("[%s] Training complete in %.2fs", call.model_type, elapsed)

    return ModelFit(
        spec=resolved,
        call=call,
        fit=estimator,
        elapsed=elapsed,
        feature_names=[str(c) for c in X_df.columns],
    )


__all__ = ["ModelFit", "fit_xy"]
