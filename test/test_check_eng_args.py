#!/usr/bin/env python3
"""
Test: protected engine arguments are filtered with a warning.
"""
import sys
import warnings
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(REPO_ROOT / "src"))

from modelspec import ProtectedArgumentWarning, bind_method, check_eng_args, rand_forest, translate


def test_protected_name_removed_with_one_warning():
    with pytest.warns(ProtectedArgumentWarning) as record:
        out = check_eng_args({"protected_x": 1, "ok_y": 2}, protect={"protected_x"}, core_args=set())
    assert out == {"ok_y": 2}
    assert len(record) == 1
    assert "protected_x" in str(record[0].message)


def test_core_names_are_protected_too():
    with pytest.warns(ProtectedArgumentWarning, match="trees"):
        out = check_eng_args({"trees": 10, "max_depth": 3}, protect=(), core_args=("trees", "mtry"))
    assert out == {"max_depth": 3}


def test_nothing_removed_means_no_warning():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        out = check_eng_args({"max_depth": 3}, protect=("X", "y"), core_args=("trees",))
    assert out == {"max_depth": 3}


def test_input_mapping_not_modified():
    args = {"X": 1, "max_depth": 3}
    with pytest.warns(ProtectedArgumentWarning):
        check_eng_args(args, protect=("X",), core_args=())
    assert args == {"X": 1, "max_depth": 3}


def test_bind_method_drops_protected_engine_args():
    """Data arguments and core names never survive binding."""
    spec = rand_forest(mode="regression").set_engine("sklearn", X=1, trees=5, max_depth=3)
    with pytest.warns(ProtectedArgumentWarning, match="X, trees") as record:
        bound = bind_method(spec)
    assert len(record) == 1
    assert dict(bound.eng_args) == {"max_depth": 3}


def test_translate_keeps_filtered_args_out_of_call():
    spec = rand_forest(mode="regression", trees=50).set_engine("sklearn", sample_weight=[1.0])
    with pytest.warns(ProtectedArgumentWarning):
        call = translate(spec)
    assert "sample_weight" not in call.args
    assert call.args["n_estimators"] == 50
