#!/usr/bin/env python3
"""K-nearest neighbors."""
from __future__ import annotations

from typing import Any

from ..modes import Mode
from ..registry import FitTemplate, register_engine, register_model
from ..spec import ModelSpec, new_model_spec

register_model(
    "nearest_neighbor",
    core_args=("neighbors", "weight_func", "dist_power"),
    modes=(Mode.CLASSIFICATION.value, Mode.REGRESSION.value),
    description="K-Nearest Neighbor",
)
for _mode, _cls in (
    (Mode.CLASSIFICATION.value, "KNeighborsClassifier"),
    (Mode.REGRESSION.value, "KNeighborsRegressor"),
):
    register_engine(
        "nearest_neighbor", "sklearn", _mode,
        fit=FitTemplate("sklearn.neighbors", _cls),
        arg_translation={
            "neighbors": "n_neighbors",
            "weight_func": "weights",
            "dist_power": "p",
        },
    )


def nearest_neighbor(
    mode: str = Mode.UNKNOWN.value,
    engine: str = "sklearn",
    neighbors: Any = None,
    weight_func: Any = None,
    dist_power: Any = None,
) -> ModelSpec:
    return new_model_spec(
        "nearest_neighbor",
        args={"neighbors": neighbors, "weight_func": weight_func, "dist_power": dist_power},
        mode=mode,
        engine=engine,
    )
