#!/usr/bin/env python3
"""
Test: mode allowlist and set_mode.
"""
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(REPO_ROOT / "src"))

from modelspec import ALL_MODES, Mode, ValidationError, check_mode, mars, set_mode


def test_all_modes_contains_expected_values():
    """The allowlist is fixed and includes unknown."""
    assert set(ALL_MODES) == {"unknown", "classification", "regression", "censored regression"}


def test_check_mode_accepts_enum_member():
    assert check_mode(Mode.REGRESSION) == "regression"


def test_check_mode_uses_first_element_of_sequence():
    assert check_mode(["classification", "regression"]) == "classification"


def test_check_mode_message_lists_legal_values():
    with pytest.raises(ValidationError) as exc:
        check_mode("not-a-real-mode")
    for mode in ALL_MODES:
        assert f"'{mode}'" in str(exc.value)


@pytest.mark.parametrize("mode", ALL_MODES)
def test_set_mode_changes_only_mode(mode):
    """set_mode replaces the mode and leaves the arguments alone."""
    spec = mars(num_terms=3).set_args(thresh=0.01)
    out = set_mode(spec, mode)
    assert out.mode == mode
    assert out.args == spec.args
    assert out.eng_args == spec.eng_args
    assert out.engine == spec.engine


def test_set_mode_none_is_noop():
    spec = mars(num_terms=3)
    assert set_mode(spec, None) is spec


def test_set_mode_invalid_leaves_spec_unchanged():
    spec = mars(num_terms=3)
    with pytest.raises(ValidationError):
        set_mode(spec, "not-a-real-mode")
    assert spec.mode == "unknown"
    assert spec.args["num_terms"] == 3


def test_set_mode_sequence_uses_first():
    out = set_mode(mars(), ("regression", "classification"))
    assert out.mode == "regression"


def test_validation_error_is_value_error():
    """Callers catching ValueError still see mode errors."""
    with pytest.raises(ValueError):
        set_mode(mars(), "nope")


def test_constructor_rejects_mode_unsupported_by_family():
    from modelspec import linear_reg

    with pytest.raises(ValidationError):
        linear_reg(mode="classification")
