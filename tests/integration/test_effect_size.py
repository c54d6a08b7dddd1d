"""
Integration tests for effect sizes from fitted scikit-learn models.

Values are checked against direct predictions from the same models.
"""

import importlib
from unittest.mock import patch

import numpy as np
import pandas as pd
import pytest
from sklearn.compose import ColumnTransformer
from sklearn.linear_model import LogisticRegression
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import OneHotEncoder

from ggformula import configure, effect_size
from ggformula.core.exceptions import (
    FormulaSpecificationError,
    PredictionError,
    ValidationError,
    VariableLookupError,
)
from ggformula.models import ModelAdapter, register_adapter, wrap_model
from ggformula.models.base import _registry
from ggformula.models.sklearn_adapter import SklearnModelAdapter


effect_size_module = importlib.import_module("ggformula.models.effect_size")


pytestmark = pytest.mark.integration

BASE = {"sector": "prof", "educ": 15, "sex": "F"}


def _rows(**changes):
    base = dict(BASE)
    to = dict(BASE, **changes)
    return pd.DataFrame([base, to])[["sector", "sex", "educ"]]


class TestLogisticModel:
    """Categorical and numeric inputs on a GLM-like classifier."""

    def test_change_on_link_scale(self, glm_model):
        result = effect_size(glm_model, "~ sex", prediction_type="link", **BASE)

        scores = glm_model.decision_function(_rows(sex="M"))
        assert result.label == "change"
        assert result.to == "M"
        assert result.value == pytest.approx(scores[1] - scores[0])
        assert result.names[0] == "change"

    def test_change_on_response_scale(self, glm_model):
        result = effect_size(glm_model, "~ sex", BASE)

        probabilities = glm_model.predict_proba(_rows(sex="M"))[:, 1]
        assert result.value == pytest.approx(probabilities[1] - probabilities[0])
        assert result.prediction_type == "response"

    def test_slope_on_link_scale(self, glm_model):
        result = effect_size(glm_model, "~ educ", prediction_type="link", **BASE)

        scores = glm_model.decision_function(_rows(educ=16))
        assert result.label == "slope"
        assert result.step == 1.0
        assert result.value == pytest.approx(scores[1] - scores[0])

    def test_slope_on_response_scale(self, glm_model):
        result = effect_size(glm_model, "~ educ", BASE)

        probabilities = glm_model.predict_proba(_rows(educ=16))[:, 1]
        assert result.to_frame().columns[0] == "slope"
        assert result.value == pytest.approx(probabilities[1] - probabilities[0])

    def test_explicit_comparison_value(self, glm_model):
        result = effect_size(glm_model, "~ educ", BASE, to=18, prediction_type="link")

        scores = glm_model.decision_function(_rows(educ=18))
        assert result.step == 3
        assert result.value == pytest.approx((scores[1] - scores[0]) / 3)

    def test_explicit_comparison_level(self, glm_model):
        result = effect_size(glm_model, "~ sector", BASE, to="sales", prediction_type="link")

        scores = glm_model.decision_function(_rows(sector="sales"))
        assert result.value == pytest.approx(scores[1] - scores[0])

    def test_default_level_skips_the_base(self, glm_model):
        result = effect_size(glm_model, "~ sector", BASE)
        assert result.to == "manuf"

    def test_to_frame_layout(self, glm_model):
        frame = effect_size(glm_model, "~ sex", BASE).to_frame()

        assert list(frame.columns) == ["change", "sex", "to:sex", "sector", "educ"]
        assert frame.loc[0, "sex"] == "F"
        assert frame.loc[0, "to:sex"] == "M"

    def test_default_step_from_configuration(self, glm_model):
        configure(effect_size__default_step=0.5)
        result = effect_size(glm_model, "~ educ", BASE, prediction_type="link")

        scores = glm_model.decision_function(_rows(educ=15.5))
        assert result.step == 0.5
        assert result.value == pytest.approx((scores[1] - scores[0]) / 0.5)

    def test_zero_step_raises(self, glm_model):
        with pytest.raises(ValidationError, match="non-zero"):
            effect_size(glm_model, "~ educ", BASE, step=0)
        with pytest.raises(ValidationError):
            effect_size(glm_model, "~ educ", BASE, to=15)


class TestTreeModel:
    """Classifiers without a link scale report one change per class."""

    def test_change_per_class(self, tree_model):
        result = effect_size(tree_model, "~ sex", age=40, sex="F", sector="prof")

        assert list(result.values.index) == ["change.Married", "change.Single"]
        assert result.values.sum() == pytest.approx(0.0)
        assert result.names[:2] == ["change.Married", "change.Single"]

        rows = pd.DataFrame([
            {"age": 40, "sex": "F", "sector": "prof"},
            {"age": 40, "sex": "M", "sector": "prof"},
        ])
        probabilities = tree_model.predict_proba(rows)
        assert result.values.to_numpy() == pytest.approx(probabilities[1] - probabilities[0])

    def test_single_value_requires_one_class(self, tree_model):
        result = effect_size(tree_model, "~ age", age=40, sex="F", sector="prof")
        with pytest.raises(ValidationError):
            result.value

    def test_link_scale_unavailable(self, tree_model):
        with pytest.raises(PredictionError, match="decision_function"):
            effect_size(tree_model, "~ sex", age=40, sex="F", sector="prof", prediction_type="link")


class TestNumericCodedFactor:
    """An encoded factor is categorical whatever the type of its codes."""

    @pytest.fixture
    def cyl_model(self, mtcars):
        pre = ColumnTransformer([
            ("cat", OneHotEncoder(handle_unknown="ignore"), ["cyl"]),
            ("num", "passthrough", ["wt"]),
        ])
        model = Pipeline([("pre", pre), ("model", LogisticRegression())])
        return model.fit(mtcars[["cyl", "wt"]], mtcars["am"])

    def test_change_against_next_level(self, cyl_model):
        result = effect_size(cyl_model, "~ cyl", cyl=4, wt=3.0, prediction_type="link")

        rows = pd.DataFrame([{"cyl": 4, "wt": 3.0}, {"cyl": 6, "wt": 3.0}])
        scores = cyl_model.decision_function(rows)
        assert result.label == "change"
        assert result.to == 6
        assert result.step is None
        assert result.value == pytest.approx(scores[1] - scores[0])

    def test_explicit_level(self, cyl_model):
        result = effect_size(cyl_model, "~ cyl", cyl=4, wt=3.0, to=8)
        assert result.label == "change"
        assert result.to == 8

    def test_unencoded_numeric_stays_a_slope(self, cyl_model):
        result = effect_size(cyl_model, "~ wt", cyl=4, wt=3.0)
        assert result.label == "slope"


class TestRegressionModel:

    def test_slope_equals_coefficient(self, linear_model):
        result = effect_size(linear_model, "~ hp", hp=120, wt=3.0)
        assert result.value == pytest.approx(linear_model.coef_[0])

    def test_regressor_has_no_link_scale(self, linear_model):
        with pytest.raises(PredictionError):
            effect_size(linear_model, "~ wt", hp=120, wt=3.0, prediction_type="link")

    def test_numeric_variable_needs_no_levels(self, linear_model):
        assert SklearnModelAdapter(linear_model).levels("hp") is None


class TestErrors:

    def test_variable_without_value(self, glm_model):
        with pytest.raises(VariableLookupError, match="sex"):
            effect_size(glm_model, "~ sex", sector="prof", educ=15)

    def test_variable_not_in_model(self, glm_model):
        with pytest.raises(VariableLookupError, match="model's predictors"):
            effect_size(glm_model, "~ age", BASE, age=40)

    def test_missing_predictor(self, glm_model):
        with pytest.raises(VariableLookupError, match="educ") as excinfo:
            effect_size(glm_model, "~ sex", sex="F", sector="prof")
        assert isinstance(excinfo.value, KeyError)

    def test_extra_values_are_ignored_with_warning(self, glm_model):
        with patch.object(effect_size_module, "logger") as mock_logger:
            result = effect_size(glm_model, "~ sex", BASE, age=40)

        mock_logger.warning.assert_called_once()
        assert "age" not in result.fixed_values

    @pytest.mark.parametrize("formula", ["y ~ sex", "~ sex + educ", "~ sex + color:red", "~ (sex)"])
    def test_bad_formula(self, glm_model, formula):
        with pytest.raises(FormulaSpecificationError):
            effect_size(glm_model, formula, BASE)

    def test_unknown_prediction_type(self, glm_model):
        with pytest.raises(PredictionError, match="'response' or 'link'"):
            effect_size(glm_model, "~ sex", BASE, prediction_type="probability")

    def test_unsupported_model(self):
        with pytest.raises(PredictionError, match="no registered adapter"):
            effect_size(object(), "~ x", x=1)

    def test_model_fitted_without_names(self, mtcars):
        from sklearn.linear_model import LinearRegression

        model = LinearRegression().fit(mtcars[["hp"]].to_numpy(), mtcars["mpg"])
        with pytest.raises(PredictionError, match="predictor names"):
            effect_size(model, "~ hp", hp=100)


class DictModelAdapter(ModelAdapter):
    """Linear model stored as a dict of coefficients."""

    name = "dict"

    @classmethod
    def supports(cls, model):
        return isinstance(model, dict) and "coef" in model

    @property
    def predictor_names(self):
        return list(self.model["coef"])

    def predict(self, new_data, prediction_type="response"):
        coef = pd.Series(self.model["coef"])
        return new_data[coef.index].astype(float) @ coef


@pytest.fixture
def dict_adapter():
    register_adapter(DictModelAdapter.name, DictModelAdapter)
    yield DictModelAdapter
    _registry._adapters.pop(DictModelAdapter.name, None)


class TestCustomAdapters:

    def test_registered_adapter_is_used(self, dict_adapter):
        model = {"coef": {"x": 2.0, "z": -1.0}}

        assert isinstance(wrap_model(model), dict_adapter)
        result = effect_size(model, "~ x", x=1.0, z=5.0)
        assert result.value == pytest.approx(2.0)
        assert result.label == "slope"

    def test_categorical_without_levels_needs_to(self, dict_adapter):
        model = {"coef": {"x": 2.0, "g": 0.0}}

        with pytest.raises(VariableLookupError, match="pass to="):
            effect_size(model, "~ g", x=1.0, g="a")

    def test_adapter_instances_pass_through(self, linear_model):
        adapter = SklearnModelAdapter(linear_model)
        assert wrap_model(adapter) is adapter
        assert effect_size(adapter, "~ wt", hp=100, wt=3.0).value == pytest.approx(
            linear_model.coef_[1]
        )

    def test_non_adapter_class_rejected(self):
        with pytest.raises(TypeError):
            register_adapter("bad", object)

    def test_levels_recorded_by_encoders(self, glm_model):
        adapter = SklearnModelAdapter(glm_model)
        assert adapter.levels("sector") == ["manuf", "prof", "sales", "service"]
        assert adapter.levels("educ") is None
        assert adapter.describe() == "Pipeline(LogisticRegression)"
        assert np.array_equal(adapter.predictor_names, ["sector", "sex", "educ"])
