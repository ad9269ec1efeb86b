#!/usr/bin/env python3
"""
Test: translation of specs into engine calls, and fit dispatch.
"""
import copy
import logging
import pickle
import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(REPO_ROOT / "src"))

from modelspec import (
    ConfigurationError,
    FitCall,
    ProtectedArgumentWarning,
    bind_method,
    boost_tree,
    eval_args,
    fit_xy,
    levels,
    linear_reg,
    logistic_reg,
    mars,
    preds,
    rand_forest,
    translate,
)


@pytest.fixture
def regression_data():
    rng = np.random.RandomState(42)
    X = pd.DataFrame(rng.randn(40, 4), columns=["a", "b", "c", "d"])
    y = pd.Series(X["a"] * 2.0 - X["b"] + rng.randn(40) * 0.1, name="target")
    return X, y


class TestBindMethod:
    """Tests for bind_method."""

    def test_single_mode_engine_fills_unknown_mode(self):
        bound = bind_method(mars())
        assert bound.mode == "regression"
        assert bound.method.fit.path == "pyearth.Earth"
        assert bound.method.arg_translation["num_terms"] == "max_terms"

    def test_ambiguous_mode_fails(self):
        with pytest.raises(ConfigurationError, match="mode"):
            bind_method(rand_forest())

    def test_missing_engine_fails(self):
        spec = rand_forest(mode="regression")
        spec = spec._replace(engine=None)
        with pytest.raises(ConfigurationError):
            bind_method(spec)

    def test_mode_without_engine_support(self):
        with pytest.raises(ConfigurationError):
            bind_method(mars(mode="classification"))


class TestTranslate:
    """Tests for translate."""

    def test_linear_reg_names(self):
        call = translate(linear_reg(penalty=0.1, mixture=0.5))
        assert isinstance(call, FitCall)
        assert dict(call.args) == {"alpha": 0.1, "l1_ratio": 0.5}
        assert call.fit.path == "sklearn.linear_model.ElasticNet"

    def test_unset_args_dropped(self):
        call = translate(rand_forest(mode="classification", trees=200))
        assert call.args["n_estimators"] == 200
        assert "max_features" not in call.args
        assert "min_samples_split" not in call.args

    def test_precedence_defaults_core_engine(self):
        spec = logistic_reg(penalty=0.01).set_engine("sgd", loss="hinge", max_iter=50)
        call = translate(spec)
        assert call.args["loss"] == "hinge"           # engine arg over default
        assert call.args["penalty"] == "elasticnet"   # default kept
        assert call.args["alpha"] == 0.01             # translated core arg
        assert call.args["max_iter"] == 50

    def test_engine_arg_cannot_override_core_arg(self):
        spec = rand_forest(mode="regression", trees=500).set_engine("sklearn", n_estimators=5)
        with pytest.warns(ProtectedArgumentWarning, match="n_estimators"):
            call = translate(spec)
        assert call.args["n_estimators"] == 500

    def test_translated_name_stripped_when_core_arg_unset(self):
        spec = rand_forest(mode="regression").set_engine("sklearn", n_estimators=5, max_depth=3)
        with pytest.warns(ProtectedArgumentWarning, match="n_estimators"):
            call = translate(spec)
        assert "n_estimators" not in call.args
        assert call.args["max_depth"] == 3

    def test_untranslated_argument_logged(self, caplog):
        spec = mars(num_terms=5, prune_method="backward")
        with caplog.at_level(logging.WARNING, logger="modelspec.translate"):
            call = translate(spec)
        assert dict(call.args) == {"max_terms": 5}
        assert "prune_method" in caplog.text

    def test_engine_specific_table(self):
        spec = boost_tree(mode="regression", engine="lightgbm", trees=300, min_n=20, learn_rate=0.05)
        call = translate(spec)
        assert call.args["n_estimators"] == 300
        assert call.args["min_child_samples"] == 20
        assert call.args["learning_rate"] == 0.05
        assert call.args["verbose"] == -1

    def test_rebinds_after_mode_change(self):
        bound = bind_method(rand_forest(mode="regression"))
        call = translate(bound.set_mode("classification"))
        assert call.mode == "classification"
        assert call.fit.func == "RandomForestClassifier"

    def test_deferred_carried_until_build(self):
        call = translate(rand_forest(mode="regression", mtry=preds() // 2))
        assert call.unresolved == ["max_features"]
        with pytest.raises(ConfigurationError, match="max_features"):
            call.build()

    def test_to_dict(self):
        payload = translate(linear_reg(penalty=1.0)).to_dict()
        assert payload["estimator"] == "sklearn.linear_model.ElasticNet"
        assert payload["args"] == {"alpha": 1.0}

    def test_build_after_eval(self):
        spec = eval_args(rand_forest(mode="regression", mtry=preds() // 2, trees=5), {"n_preds": 4})
        estimator = translate(spec).build()
        assert estimator.max_features == 2
        assert estimator.n_estimators == 5


class TestFitXY:
    """End-to-end fits with sklearn engines."""

    def test_rand_forest_with_descriptor(self, regression_data):
        X, y = regression_data
        spec = rand_forest(mode="regression", trees=10, mtry=preds() // 2, min_n=4)
        fitted = fit_xy(spec, X, y)
        assert fitted.fit.n_estimators == 10
        assert fitted.fit.max_features == 2
        assert fitted.fit.min_samples_split == 4
        assert fitted.spec.args["mtry"] == 2
        assert fitted.feature_names == ["a", "b", "c", "d"]
        assert fitted.engine == "sklearn"
        assert fitted.elapsed >= 0.0

    def test_linear_reg_fit(self, regression_data):
        X, y = regression_data
        fitted = fit_xy(linear_reg(engine="ols"), X, y)
        assert fitted.fit.coef_.shape == (4,)
        assert fitted.fit.coef_[0] == pytest.approx(2.0, abs=0.2)

    def test_classification_fit(self, regression_data):
        X, _ = regression_data
        y = pd.Series(np.where(X["a"] > 0, "pos", "neg"))
        fitted = fit_xy(rand_forest(mode="classification", trees=5), X, y)
        assert set(fitted.fit.classes_) == {"neg", "pos"}

    def test_missing_optional_engine(self, regression_data, monkeypatch):
        X, y = regression_data
        import modelspec.registry as registry

        def _fail(self):
            raise ImportError("No module named 'pyearth'")

        monkeypatch.setattr(registry.FitTemplate, "load", _fail)
        with pytest.raises(ImportError, match="sklearn-contrib-py-earth"):
            fit_xy(mars(num_terms=3), X, y)

    def test_lightgbm_fit(self, regression_data):
        pytest.importorskip("lightgbm")
        X, y = regression_data
        spec = boost_tree(mode="regression", engine="lightgbm", trees=5, min_n=2)
        fitted = fit_xy(spec, X, y)
        assert fitted.fit.n_estimators == 5

    def test_integer_labels_resolve_levels(self, regression_data):
        X, _ = regression_data
        y = pd.Series(np.where(X["a"] > 0, 1, 0))
        spec = rand_forest(mode="classification", trees=5, mtry=levels().map(len))
        fitted = fit_xy(spec, X, y)
        assert fitted.spec.args["mtry"] == 2
        assert fitted.fit.max_features == 2


class TestCopying:
    """Specs, calls and fits survive pickle and deepcopy."""

    @pytest.mark.parametrize("clone", [lambda obj: pickle.loads(pickle.dumps(obj)), copy.deepcopy])
    def test_specs_and_calls(self, clone):
        spec = rand_forest(mode="regression", trees=20, min_n=3).set_engine("sklearn", max_depth=4)
        bound = bind_method(spec)
        call = translate(bound)
        assert clone(spec) == spec
        assert clone(bound) == bound
        assert clone(bound).method.fit.defaults == bound.method.fit.defaults
        copied = clone(call)
        assert copied == call
        assert dict(copied.args) == {
            "n_jobs": -1, "random_state": 42,
            "n_estimators": 20, "min_samples_split": 3, "max_depth": 4,
        }

    def test_copied_spec_is_still_read_only(self):
        copied = copy.deepcopy(bind_method(linear_reg(penalty=0.1)))
        with pytest.raises(TypeError):
            copied.args["penalty"] = 1.0
        with pytest.raises(TypeError):
            copied.method.arg_translation["penalty"] = "beta"

    def test_model_fit(self, regression_data):
        X, y = regression_data
        fitted = fit_xy(rand_forest(mode="regression", trees=5), X, y)
        restored = pickle.loads(pickle.dumps(fitted))
        assert restored.spec == fitted.spec
        assert restored.call == fitted.call
        np.testing.assert_allclose(restored.fit.predict(X), fitted.fit.predict(X))
        assert copy.deepcopy(fitted).feature_names == ["a", "b", "c", "d"]
