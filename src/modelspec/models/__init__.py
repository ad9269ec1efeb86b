#!/usr/bin/env python3
"""
Model families.

Importing this package registers every family and its engines.

Usage:
    from modelspec.models import rand_forest, make_spec

    spec = rand_forest(trees=500).set_mode("regression")
    spec = make_spec("rand_forest", mode="regression", trees=500)
"""
from typing import Any, Optional

from ..spec import ModelSpec, new_model_spec
from .linear import linear_reg, logistic_reg
from .trees import boost_tree, decision_tree, rand_forest
from .neighbors import nearest_neighbor
from .mars import mars

CONSTRUCTORS = {
    "linear_reg": linear_reg,
    "logistic_reg": logistic_reg,
    "decision_tree": decision_tree,
    "rand_forest": rand_forest,
    "boost_tree": boost_tree,
    "nearest_neighbor": nearest_neighbor,
    "mars": mars,
}


def make_spec(
    model_type: str,
    mode: Optional[str] = None,
    engine: Optional[str] = None,
    **args: Any,
) -> ModelSpec:
    """
    Build a spec by type tag.

    Uses the family's constructor (and so its default mode and engine) when
    one exists, otherwise a bare spec with no engine.
    """
    constructor = CONSTRUCTORS.get(model_type)
    if constructor is None:
        return new_model_spec(model_type, args=args, mode=mode or "unknown", engine=engine)
    kwargs = dict(args)
    if mode is not None:
        kwargs["mode"] = mode
    if engine is not None:
        kwargs["engine"] = engine
    return constructor(**kwargs)


__all__ = [
    "CONSTRUCTORS",
    "make_spec",
    "linear_reg",
    "logistic_reg",
    "decision_tree",
    "rand_forest",
    "boost_tree",
    "nearest_neighbor",
    "mars",
]
