#!/usr/bin/env python3
"""
Linear model families: ``linear_reg`` and ``logistic_reg``.

Engines:
- linear_reg  / sklearn : ElasticNet (penalty -> alpha, mixture -> l1_ratio)
- linear_reg  / ols     : LinearRegression (no tuning arguments)
- linear_reg  / sgd     : SGDRegressor with an elastic-net penalty
- logistic_reg / sgd    : SGDClassifier with log loss and an elastic-net penalty
"""
from __future__ import annotations

from typing import Any

from ..modes import Mode
from ..registry import FitTemplate, register_engine, register_model
from ..spec import ModelSpec, new_model_spec

_PENALTY_ARGS = {"penalty": "alpha", "mixture": "l1_ratio"}

register_model(
    "linear_reg",
    core_args=("penalty", "mixture"),
    modes=(Mode.REGRESSION.value,),
    description="Linear Regression",
)
register_engine(
    "linear_reg", "sklearn", Mode.REGRESSION.value,
    fit=FitTemplate("sklearn.linear_model", "ElasticNet"),
    arg_translation=_PENALTY_ARGS,
)
register_engine(
    "linear_reg", "ols", Mode.REGRESSION.value,
    fit=FitTemplate("sklearn.linear_model", "LinearRegression"),
    arg_translation={},
)
register_engine(
    "linear_reg", "sgd", Mode.REGRESSION.value,
    fit=FitTemplate("sklearn.linear_model", "SGDRegressor", defaults={"penalty": "elasticnet"}),
    arg_translation=_PENALTY_ARGS,
)

register_model(
    "logistic_reg",
    core_args=("penalty", "mixture"),
    modes=(Mode.CLASSIFICATION.value,),
    description="Logistic Regression",
)
register_engine(
    "logistic_reg", "sgd", Mode.CLASSIFICATION.value,
    fit=FitTemplate(
        "sklearn.linear_model", "SGDClassifier",
        defaults={"loss": "log_loss", "penalty": "elasticnet"},
    ),
    arg_translation=_PENALTY_ARGS,
)


def linear_reg(
    mode: str = Mode.REGRESSION.value,
    engine: str = "sklearn",
    penalty: Any = None,
    mixture: Any = None,
) -> ModelSpec:
    """Linear regression; ``penalty`` is the regularization amount, ``mixture`` the L1 share."""
    return new_model_spec(
        "linear_reg",
        args={"penalty": penalty, "mixture": mixture},
        mode=mode,
        engine=engine,
    )


def logistic_reg(
    mode: str = Mode.CLASSIFICATION.value,
    engine: str = "sgd",
    penalty: Any = None,
    mixture: Any = None,
) -> ModelSpec:
    """Logistic regression with an elastic-net penalty."""
    return new_model_spec(
        "logistic_reg",
        args={"penalty": penalty, "mixture": mixture},
        mode=mode,
        engine=engine,
    )
