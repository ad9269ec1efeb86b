"""
modelspec: engine-independent model specifications.

Describe a model by type, mode and standardized hyperparameters, choose the
fitting engine later, and let the package translate argument names when the
model is fit.

Usage:
    from modelspec import rand_forest, preds, fit_xy

    spec = (
        rand_forest(trees=500, mtry=preds() // 3)
        .set_mode("regression")
        .set_engine("sklearn", max_depth=8)
    )
    fitted = fit_xy(spec, X, y)
"""
from .errors import (
    ModelSpecError,
    ValidationError,
    ArgumentError,
    ConfigurationError,
    ProtectedArgumentWarning,
)
from .modes import Mode, ALL_MODES, check_mode
from .descriptors import (
    Deferred,
    Literal,
    DescriptorContext,
    UNRESOLVED,
    obs,
    preds,
    cols,
    facts,
    levels,
)
from .registry import (
    FitTemplate,
    Method,
    register_model,
    register_engine,
    get_core_args,
    get_model_info,
    list_models,
    list_engines,
    show_engines,
    check_engine_available,
)
from .spec import (
    ModelSpec,
    new_model_spec,
    set_mode,
    set_args,
    update,
    set_engine,
    check_eng_args,
    bind_method,
    maybe_eval,
    eval_args,
    has_descriptors,
)
from .models import (
    make_spec,
    linear_reg,
    logistic_reg,
    decision_tree,
    rand_forest,
    boost_tree,
    nearest_neighbor,
    mars,
)
from .translate import FitCall, translate
from .fit import ModelFit, fit_xy
from .config import SpecConfig, load_spec

__version__ = "0.1.0"

__all__ = [
    # Errors
    "ModelSpecError",
    "ValidationError",
    "ArgumentError",
    "ConfigurationError",
    "ProtectedArgumentWarning",

    # Modes
    "Mode",
    "ALL_MODES",
    "check_mode",

    # Descriptors
    "Deferred",
    "Literal",
    "DescriptorContext",
    "UNRESOLVED",
    "obs",
    "preds",
    "cols",
    "facts",
    "levels",

    # Registry
    "FitTemplate",
    "Method",
    "register_model",
    "register_engine",
    "get_core_args",
    "get_model_info",
    "list_models",
    "list_engines",
    "show_engines",
    "check_engine_available",

    # Specification
    "ModelSpec",
    "new_model_spec",
    "set_mode",
    "set_args",
    "update",
    "set_engine",
    "check_eng_args",
    "bind_method",
    "maybe_eval",
    "eval_args",
    "has_descriptors",

    # Constructors
    "make_spec",
    "linear_reg",
    "logistic_reg",
    "decision_tree",
    "rand_forest",
    "boost_tree",
    "nearest_neighbor",
    "mars",

    # Translation and fitting
    "FitCall",
    "translate",
    "ModelFit",
    "fit_xy",

    # Config
    "SpecConfig",
    "load_spec",
]
