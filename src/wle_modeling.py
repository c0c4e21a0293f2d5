"""
Modeling Module
Project: Weight Lifting Exercise quality prediction
Purpose: Partition the cleaned data, fit the three tree-based classifiers and evaluate them
"""

from __future__ import annotations

from typing import Dict, List

import numpy as np
import pandas as pd

from sklearn.model_selection import StratifiedKFold, train_test_split, cross_val_score
from sklearn.metrics import accuracy_score, cohen_kappa_score, confusion_matrix, classification_report
from sklearn.tree import DecisionTreeClassifier
from sklearn.ensemble import RandomForestClassifier, GradientBoostingClassifier
from sklearn.impute import SimpleImputer
from sklearn.pipeline import Pipeline

import wle_config as config


MODEL_LABELS = {
    'decision_tree': 'Decision Tree',
    'random_forest': 'Random Forest',
    'gradient_boosting': 'Gradient Boosting',
}


def split_data(data: pd.DataFrame, target: str = config.TARGET_COLUMN,
               train_fraction: float = config.TRAIN_FRACTION, seed: int = config.RANDOM_SEED):
    """Stratified train/validation partition on the target column.

    Every class keeps (roughly) the same share in both parts, so the hold-out
    confusion matrix covers all five execution styles.
    """
    if not 0.0 < train_fraction < 1.0:
        raise ValueError("train_fraction must be between 0 and 1")

    X = data.drop(columns=[target])
    y = data[target].astype(str)
    X_train, X_valid, y_train, y_valid = train_test_split(
        X, y, train_size=train_fraction, stratify=y, random_state=seed
    )
    return X_train, X_valid, y_train, y_valid


def _with_imputer(clf) -> Pipeline:
    # Predictors kept under a non-zero missing-ratio threshold may still hold NaN
    return Pipeline(
        steps=[
            ("imputer", SimpleImputer(strategy="median", keep_empty_features=True)),
            ("clf", clf),
        ]
    )


def build_models(seed: int = config.RANDOM_SEED) -> Dict[str, Pipeline]:
    """Library-default classifiers with fixed seeds, each behind a median imputer."""
    return {
        'decision_tree': _with_imputer(DecisionTreeClassifier(random_state=seed)),
        'random_forest': _with_imputer(RandomForestClassifier(n_jobs=-1, random_state=seed)),
        'gradient_boosting': _with_imputer(GradientBoostingClassifier(random_state=seed)),
    }


class ModelTrainer:
    """Fit, cross-validate and evaluate a set of classifiers on one split"""

    def __init__(self, models: Dict[str, object] | None = None, seed: int = config.RANDOM_SEED):
        self.seed = seed
        self.models = build_models(seed) if models is None else dict(models)
        self.cv_results: Dict[str, Dict[str, float]] = {}
        self.results: Dict[str, Dict[str, object]] = {}
        self.labels: List[str] = []

    def _model(self, name: str):
        if name not in self.models:
            raise KeyError(f"Unknown model '{name}'. Available: {list(self.models)}")
        return self.models[name]

    def cross_validate(self, name: str, X, y, folds: int = config.CV_FOLDS) -> Dict[str, float]:
        """Stratified K-fold accuracy on the training split."""
        model = self._model(name)
        skf = StratifiedKFold(n_splits=folds, shuffle=True, random_state=self.seed)
        scores = cross_val_score(model, X, y, cv=skf, scoring='accuracy')
        out = {
            'acc_mean': float(np.mean(scores)),
            'acc_std': float(np.std(scores)),
            'folds': int(folds),
        }
        self.cv_results[name] = out
        print(f"\n[CV] {MODEL_LABELS.get(name, name)} ({folds}-fold)")
        print(f"  accuracy={out['acc_mean']:.4f} +/- {out['acc_std']:.4f}")
        return out

    def cross_validate_all(self, X, y, folds: int = config.CV_FOLDS) -> Dict[str, Dict[str, float]]:
        for name in self.models:
            self.cross_validate(name, X, y, folds)
        return self.cv_results

    def fit(self, X_train, y_train) -> None:
        self.labels = sorted(pd.unique(np.asarray(y_train, dtype=str)).tolist())
        for name, model in self.models.items():
            print(f"[FIT] {MODEL_LABELS.get(name, name)} on {len(X_train)} rows")
            model.fit(X_train, y_train)

    def evaluate(self, X_valid, y_valid) -> Dict[str, Dict[str, object]]:
        """Hold-out metrics for every fitted model.

        Returns, per model: accuracy, out-of-sample error (1 - accuracy),
        Cohen's kappa, the confusion matrix (rows = actual, columns =
        predicted), per-class error and the text classification report.
        """
        labels = sorted(set(self.labels) | set(np.asarray(y_valid, dtype=str)))
        for name, model in self.models.items():
            y_pred = model.predict(X_valid)
            acc = float(accuracy_score(y_valid, y_pred))
            cm = confusion_matrix(y_valid, y_pred, labels=labels)

            support = cm.sum(axis=1)
            correct = np.diag(cm)
            class_error = {
                label: (float(1.0 - correct[k] / support[k]) if support[k] else float('nan'))
                for k, label in enumerate(labels)
            }

            self.results[name] = {
                'accuracy': acc,
                'oos_error': 1.0 - acc,
                'kappa': float(cohen_kappa_score(y_valid, y_pred)),
                'confusion_matrix': pd.DataFrame(cm, index=labels, columns=labels),
                'class_error': class_error,
                'report': classification_report(y_valid, y_pred, labels=labels, zero_division=0),
            }

            print(f"\n[HOLD-OUT] {MODEL_LABELS.get(name, name)}")
            print(f"  accuracy={acc:.4f}  out-of-sample error={1.0 - acc:.4f}  "
                  f"kappa={self.results[name]['kappa']:.4f}")
            print("  Confusion matrix (rows=actual, cols=predicted):")
            print(self.results[name]['confusion_matrix'].to_string())
        return self.results

    def best_model_name(self) -> str:
        """Model with the highest hold-out accuracy; ties follow config.MODEL_ORDER."""
        if not self.results:
            raise ValueError("evaluate must be called before best_model_name")
        rank = {name: i for i, name in enumerate(config.MODEL_ORDER)}
        return min(self.results,
                   key=lambda name: (-self.results[name]['accuracy'], rank.get(name, len(rank))))

    def predict(self, X_test) -> pd.DataFrame:
        """Predicted labels from every fitted model, one column per model."""
        return pd.DataFrame(
            {name: model.predict(X_test) for name, model in self.models.items()},
            index=getattr(X_test, 'index', None),
        )

    def feature_importances(self, name: str, feature_names, top_n: int = 20) -> pd.Series:
        model = self._model(name)
        if isinstance(model, Pipeline):
            model = model.named_steps['clf']
        if not hasattr(model, 'feature_importances_'):
            raise ValueError(f"Model '{name}' does not expose feature importances")
        imp = pd.Series(model.feature_importances_, index=list(feature_names))
        return imp.sort_values(ascending=False).head(top_n)
