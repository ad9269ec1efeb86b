#!/usr/bin/env python3
"""
Tree-based model families: ``decision_tree``, ``rand_forest``, ``boost_tree``.

GBDT engines (LightGBM, XGBoost) are optional and only imported at fit time.
"""
from __future__ import annotations

from typing import Any

from ..modes import Mode
from ..registry import DEFAULT_DATA_ARGS, FitTemplate, register_engine, register_model
from ..spec import ModelSpec, new_model_spec

_BOTH_MODES = (Mode.CLASSIFICATION.value, Mode.REGRESSION.value)


def _by_mode(classifier: str, regressor: str):
    return (
        (Mode.CLASSIFICATION.value, classifier),
        (Mode.REGRESSION.value, regressor),
    )


# ============================================================================
# Decision tree
# ============================================================================

register_model(
    "decision_tree",
    core_args=("cost_complexity", "tree_depth", "min_n"),
    modes=_BOTH_MODES,
    description="Decision Tree",
)
for _mode, _cls in _by_mode("DecisionTreeClassifier", "DecisionTreeRegressor"):
    register_engine(
        "decision_tree", "sklearn", _mode,
        fit=FitTemplate("sklearn.tree", _cls),
        arg_translation={
            "cost_complexity": "ccp_alpha",
            "tree_depth": "max_depth",
            "min_n": "min_samples_split",
        },
    )


def decision_tree(
    mode: str = Mode.UNKNOWN.value,
    engine: str = "sklearn",
    cost_complexity: Any = None,
    tree_depth: Any = None,
    min_n: Any = None,
) -> ModelSpec:
    """Single decision tree."""
    return new_model_spec(
        "decision_tree",
        args={"cost_complexity": cost_complexity, "tree_depth": tree_depth, "min_n": min_n},
        mode=mode,
        engine=engine,
    )


# ============================================================================
# Random forest
# ============================================================================

_FOREST_ARGS = {
    "mtry": "max_features",
    "trees": "n_estimators",
    "min_n": "min_samples_split",
}

register_model(
    "rand_forest",
    core_args=("mtry", "trees", "min_n"),
    modes=_BOTH_MODES,
    description="Random Forest",
)
for _mode, _cls in _by_mode("RandomForestClassifier", "RandomForestRegressor"):
    register_engine(
        "rand_forest", "sklearn", _mode,
        fit=FitTemplate("sklearn.ensemble", _cls, defaults={"n_jobs": -1, "random_state": 42}),
        arg_translation=_FOREST_ARGS,
    )
for _mode, _cls in _by_mode("ExtraTreesClassifier", "ExtraTreesRegressor"):
    register_engine(
        "rand_forest", "extra_trees", _mode,
        fit=FitTemplate("sklearn.ensemble", _cls, defaults={"n_jobs": -1, "random_state": 42}),
        arg_translation=_FOREST_ARGS,
    )


def rand_forest(
    mode: str = Mode.UNKNOWN.value,
    engine: str = "sklearn",
    mtry: Any = None,
    trees: Any = None,
    min_n: Any = None,
) -> ModelSpec:
    """Random forest; ``mtry`` is the number of predictors sampled per split."""
    return new_model_spec(
        "rand_forest",
        args={"mtry": mtry, "trees": trees, "min_n": min_n},
        mode=mode,
        engine=engine,
    )


# ============================================================================
# Boosted trees
# ============================================================================

_BOOST_CORE = (
    "mtry", "trees", "min_n", "tree_depth", "learn_rate",
    "loss_reduction", "sample_size", "stop_iter",
)
_GBDT_DATA_ARGS = DEFAULT_DATA_ARGS + ("eval_set",)

register_model(
    "boost_tree",
    core_args=_BOOST_CORE,
    modes=_BOTH_MODES,
    description="Boosted Tree",
)
for _mode, _cls in _by_mode("GradientBoostingClassifier", "GradientBoostingRegressor"):
    register_engine(
        "boost_tree", "sklearn", _mode,
        fit=FitTemplate("sklearn.ensemble", _cls),
        arg_translation={
            "mtry": "max_features",
            "trees": "n_estimators",
            "min_n": "min_samples_split",
            "tree_depth": "max_depth",
            "learn_rate": "learning_rate",
            "loss_reduction": "min_impurity_decrease",
            "sample_size": "subsample",
            "stop_iter": "n_iter_no_change",
        },
    )
for _mode, _cls in _by_mode("LGBMClassifier", "LGBMRegressor"):
    register_engine(
        "boost_tree", "lightgbm", _mode,
        fit=FitTemplate("lightgbm", _cls, defaults={"verbose": -1}, data_args=_GBDT_DATA_ARGS),
        arg_translation={
            "trees": "n_estimators",
            "min_n": "min_child_samples",
            "tree_depth": "max_depth",
            "learn_rate": "learning_rate",
            "loss_reduction": "min_split_gain",
            "sample_size": "subsample",
        },
        protect=("objective",),
        optional_dependency="lightgbm",
    )
for _mode, _cls in _by_mode("XGBClassifier", "XGBRegressor"):
    register_engine(
        "boost_tree", "xgboost", _mode,
        fit=FitTemplate("xgboost", _cls, data_args=_GBDT_DATA_ARGS),
        arg_translation={
            "trees": "n_estimators",
            "min_n": "min_child_weight",
            "tree_depth": "max_depth",
            "learn_rate": "learning_rate",
            "loss_reduction": "gamma",
            "sample_size": "subsample",
            "stop_iter": "early_stopping_rounds",
        },
        protect=("objective",),
        optional_dependency="xgboost",
    )


def boost_tree(
    mode: str = Mode.UNKNOWN.value,
    engine: str = "sklearn",
    mtry: Any = None,
    trees: Any = None,
    min_n: Any = None,
    tree_depth: Any = None,
    learn_rate: Any = None,
    loss_reduction: Any = None,
    sample_size: Any = None,
    stop_iter: Any = None,
) -> ModelSpec:
    """Gradient boosted trees."""
    return new_model_spec(
        "boost_tree",
        args={
            "mtry": mtry,
            "trees": trees,
            "min_n": min_n,
            "tree_depth": tree_depth,
            "learn_rate": learn_rate,
            "loss_reduction": loss_reduction,
            "sample_size": sample_size,
            "stop_iter": stop_iter,
        },
        mode=mode,
        engine=engine,
    )
