#!/usr/bin/env python3
"""
Multivariate adaptive regression splines (MARS).

The ``earth`` engine is py-earth's ``Earth`` estimator, which has no
counterpart for ``prune_method``; that argument is ignored at translation.
"""
from __future__ import annotations

from typing import Any

from ..modes import Mode
from ..registry import FitTemplate, register_engine, register_model
from ..spec import ModelSpec, new_model_spec

register_model(
    "mars",
    core_args=("num_terms", "prod_degree", "prune_method"),
    modes=(Mode.CLASSIFICATION.value, Mode.REGRESSION.value),
    description="MARS",
)
register_engine(
    "mars", "earth", Mode.REGRESSION.value,
    fit=FitTemplate("pyearth", "Earth"),
    arg_translation={"num_terms": "max_terms", "prod_degree": "max_degree"},
    optional_dependency="sklearn-contrib-py-earth",
)


def mars(
    mode: str = Mode.UNKNOWN.value,
    engine: str = "earth",
    num_terms: Any = None,
    prod_degree: Any = None,
    prune_method: Any = None,
) -> ModelSpec:
    """
    MARS model.

    Args:
        mode: "regression", "classification" or "unknown"
        engine: Fitting engine
        num_terms: Maximum number of model terms
        prod_degree: Highest interaction degree
        prune_method: Pruning method
    """
    return new_model_spec(
        "mars",
        args={"num_terms": num_terms, "prod_degree": prod_degree, "prune_method": prune_method},
        mode=mode,
        engine=engine,
    )
