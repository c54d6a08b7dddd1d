"""
Shared pytest configuration and fixtures for ggformula tests.

This module provides common test data, fitted models and configuration
isolation used across the test suite.
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest
from sklearn.compose import ColumnTransformer
from sklearn.linear_model import LinearRegression, LogisticRegression
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import OneHotEncoder
from sklearn.tree import DecisionTreeClassifier

from ggformula.config.settings import reset_default_config
from ggformula.utils.logging import reset_logging


ENV_VARS = [
    "GGFORMULA_LOG_LEVEL",
    "GGFORMULA_VERBOSE",
    "GGFORMULA_DATA_NAME",
    "GGFORMULA_DEFAULT_STEP",
    "GGFORMULA_PREDICTION_TYPE",
]


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Fresh default configuration with no user config file or environment overrides."""
    monkeypatch.setenv("HOME", str(tmp_path))
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    reset_default_config()
    reset_logging()
    yield
    reset_default_config()
    reset_logging()


@pytest.fixture(scope="session")
def mtcars():
    """First ten rows of the classic mtcars data."""
    return pd.DataFrame({
        "mpg": [21.0, 21.0, 22.8, 21.4, 18.7, 18.1, 14.3, 24.4, 22.8, 19.2],
        "cyl": [6, 6, 4, 6, 8, 6, 8, 4, 4, 6],
        "hp": [110, 110, 93, 110, 175, 105, 245, 62, 95, 123],
        "wt": [2.62, 2.875, 2.32, 3.215, 3.44, 3.46, 3.57, 3.19, 3.15, 3.44],
        "am": [1, 1, 1, 0, 0, 0, 0, 0, 0, 0],
    })


@pytest.fixture(scope="session")
def cps():
    """Synthetic wage survey with categorical and numeric predictors."""
    rng = np.random.default_rng(42)
    n = 400
    sector = rng.choice(["prof", "manuf", "sales", "service"], n)
    sex = rng.choice(["F", "M"], n)
    educ = rng.integers(8, 19, n)
    age = rng.integers(18, 65, n)
    logit = -3.0 + 0.06 * age + 0.5 * (sex == "M") + 0.05 * educ
    married = np.where(rng.random(n) < 1 / (1 + np.exp(-logit)), "Married", "Single")
    return pd.DataFrame({
        "sector": sector,
        "sex": sex,
        "educ": educ,
        "age": age,
        "married": married,
    })


def _encoded(categorical, numeric, model):
    pre = ColumnTransformer([
        ("cat", OneHotEncoder(handle_unknown="ignore"), categorical),
        ("num", "passthrough", numeric),
    ])
    return Pipeline([("pre", pre), ("model", model)])


@pytest.fixture(scope="session")
def glm_model(cps):
    """Logistic regression of married == 'Married' on sector + sex + educ."""
    model = _encoded(["sector", "sex"], ["educ"], LogisticRegression(max_iter=1000))
    return model.fit(cps[["sector", "sex", "educ"]], cps["married"] == "Married")


@pytest.fixture(scope="session")
def tree_model(cps):
    """Classification tree of married on age + sex + sector."""
    model = _encoded(["sex", "sector"], ["age"], DecisionTreeClassifier(max_depth=4, random_state=0))
    return model.fit(cps[["age", "sex", "sector"]], cps["married"])


@pytest.fixture(scope="session")
def linear_model(mtcars):
    """Ordinary least squares of mpg on hp + wt."""
    return LinearRegression().fit(mtcars[["hp", "wt"]], mtcars["mpg"])


# Markers for different test types
def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test (fast)"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (medium speed)"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow (may take >10 seconds)"
    )
