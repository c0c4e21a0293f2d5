import numpy as np
import pandas as pd
import pytest
from sklearn.ensemble import GradientBoostingClassifier, RandomForestClassifier
from sklearn.tree import DecisionTreeClassifier
from sklearn.impute import SimpleImputer

from wle_modeling import ModelTrainer, build_models, split_data
from wle_preprocessing import DataPreprocessor


@pytest.fixture
def clean_frame(wle_frame):
    return DataPreprocessor().fit_transform(wle_frame)


@pytest.fixture
def fitted(clean_frame):
    X_train, X_valid, y_train, y_valid = split_data(clean_frame, seed=7)
    trainer = ModelTrainer(seed=7)
    trainer.fit(X_train, y_train)
    return trainer, X_valid, y_valid


def test_split_data_is_stratified(clean_frame):
    X_train, X_valid, y_train, y_valid = split_data(clean_frame, train_fraction=0.7, seed=1)

    assert len(X_train) + len(X_valid) == len(clean_frame)
    assert len(X_train) == 175
    assert "classe" not in X_train.columns
    assert set(y_train) == set(y_valid) == {"A", "B", "C", "D", "E"}
    assert y_valid.value_counts().tolist() == [15] * 5


def test_split_data_is_deterministic(clean_frame):
    first = split_data(clean_frame, seed=3)[0]
    second = split_data(clean_frame, seed=3)[0]

    assert first.index.equals(second.index)


def test_split_data_rejects_bad_fraction(clean_frame):
    with pytest.raises(ValueError):
        split_data(clean_frame, train_fraction=1.0)


def test_build_models_uses_three_tree_learners():
    models = build_models(seed=5)

    assert isinstance(models["decision_tree"].named_steps["clf"], DecisionTreeClassifier)
    assert isinstance(models["random_forest"].named_steps["clf"], RandomForestClassifier)
    assert isinstance(models["gradient_boosting"].named_steps["clf"], GradientBoostingClassifier)
    assert all(m.named_steps["clf"].random_state == 5 for m in models.values())
    assert all(isinstance(m.named_steps["imputer"], SimpleImputer) for m in models.values())


def test_models_accept_partly_missing_predictors(clean_frame, wle_test_frame):
    frame = clean_frame.copy()
    feature = frame.columns[0]
    frame.loc[frame.index[::3], feature] = np.nan
    X_train, X_valid, y_train, y_valid = split_data(frame, seed=7)
    trainer = ModelTrainer(seed=7)

    trainer.fit(X_train, y_train)
    results = trainer.evaluate(X_valid, y_valid)

    assert set(results) == {"decision_tree", "random_forest", "gradient_boosting"}
    X_test = wle_test_frame[list(frame.columns[:-1])].copy()
    X_test[feature] = np.nan
    assert len(trainer.predict(X_test)) == 20


def test_cross_validate_reports_fold_accuracy(clean_frame):
    X_train, _, y_train, _ = split_data(clean_frame, seed=7)
    trainer = ModelTrainer(seed=7)

    cv = trainer.cross_validate("decision_tree", X_train, y_train, folds=3)

    assert cv["folds"] == 3
    assert 0.0 <= cv["acc_mean"] <= 1.0
    assert trainer.cv_results["decision_tree"] is cv


def test_cross_validate_unknown_model(clean_frame):
    with pytest.raises(KeyError):
        ModelTrainer().cross_validate("svm", clean_frame.drop(columns=["classe"]), clean_frame["classe"])


def test_evaluate_reports_metrics(fitted):
    trainer, X_valid, y_valid = fitted

    results = trainer.evaluate(X_valid, y_valid)

    assert set(results) == {"decision_tree", "random_forest", "gradient_boosting"}
    for res in results.values():
        cm = res["confusion_matrix"]
        assert list(cm.index) == list(cm.columns) == ["A", "B", "C", "D", "E"]
        assert cm.to_numpy().sum() == len(y_valid)
        assert res["accuracy"] == pytest.approx(np.trace(cm.to_numpy()) / len(y_valid))
        assert res["oos_error"] == pytest.approx(1.0 - res["accuracy"])
        assert set(res["class_error"]) == {"A", "B", "C", "D", "E"}
        assert -1.0 <= res["kappa"] <= 1.0
    # Five well separated classes are far above chance
    assert results["random_forest"]["accuracy"] > 0.6


def test_best_model_name_uses_accuracy_then_order():
    trainer = ModelTrainer()
    trainer.results = {
        "decision_tree": {"accuracy": 0.9},
        "random_forest": {"accuracy": 0.8},
        "gradient_boosting": {"accuracy": 0.9},
    }
    assert trainer.best_model_name() == "gradient_boosting"

    trainer.results["random_forest"]["accuracy"] = 0.95
    assert trainer.best_model_name() == "random_forest"


def test_best_model_name_before_evaluate():
    with pytest.raises(ValueError):
        ModelTrainer().best_model_name()


def test_predict_returns_one_column_per_model(fitted, wle_test_frame, clean_frame):
    trainer, _, _ = fitted
    X_test = wle_test_frame[list(clean_frame.columns[:-1])]

    predictions = trainer.predict(X_test)

    assert list(predictions.columns) == ["decision_tree", "random_forest", "gradient_boosting"]
    assert len(predictions) == 20
    assert set(predictions.stack()) <= {"A", "B", "C", "D", "E"}


def test_feature_importances(fitted, clean_frame):
    trainer, _, _ = fitted
    features = list(clean_frame.columns[:-1])

    imp = trainer.feature_importances("random_forest", features, top_n=3)

    assert isinstance(imp, pd.Series)
    assert len(imp) == 3
    assert set(imp.index) <= set(features)
    assert imp.is_monotonic_decreasing
