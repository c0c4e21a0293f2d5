"""
Report Module
Project: Weight Lifting Exercise quality prediction
Purpose: Write the answer files, the metric summary and the report figures
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pandas as pd

import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend; figures are only saved
import matplotlib.pyplot as plt
import seaborn as sns

from wle_modeling import MODEL_LABELS


def write_prediction_files(predictions: Sequence[str], out_dir: Path,
                           problem_ids: Optional[Sequence[int]] = None) -> List[Path]:
    """Write one `problem_id_<i>.txt` file per test case holding its predicted label.

    Files are numbered by `problem_ids` when given, otherwise 1..n.
    """
    predictions = [str(p) for p in predictions]
    if problem_ids is None:
        problem_ids = range(1, len(predictions) + 1)
    problem_ids = [int(i) for i in problem_ids]
    if len(problem_ids) != len(predictions):
        raise ValueError("problem_ids and predictions must have the same length")

    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    paths = []
    for problem_id, label in zip(problem_ids, predictions):
        path = out_dir / f"problem_id_{problem_id}.txt"
        path.write_text(f"{label}\n", encoding='utf-8')
        paths.append(path)
    print(f"[SAVED] {len(paths)} answer files under {out_dir}")
    return paths


def write_predictions_csv(predictions: pd.DataFrame, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    predictions.to_csv(path, index=False)
    print(f"[SAVED] {path}")
    return path


def write_metrics_summary(out_file: Path, shapes: Dict[str, tuple], dropped: Dict[str, list],
                          cv_results: Dict[str, Dict[str, float]], results: Dict[str, Dict[str, object]],
                          best_model: str, predictions: pd.DataFrame) -> Path:
    """Write a short plain-text report of the whole run."""
    out_file = Path(out_file)
    out_file.parent.mkdir(parents=True, exist_ok=True)
    with out_file.open("w", encoding="utf-8") as f:
        f.write("Weight Lifting Exercise: Model Summary\n")
        f.write("======================================\n\n")

        f.write("Data:\n")
        for name, shape in shapes.items():
            f.write(f"  {name}: {shape[0]} rows x {shape[1]} columns\n")

        f.write("\nCleaning:\n")
        for step, columns in dropped.items():
            f.write(f"  {step}: {len(columns)} columns removed\n")

        if cv_results:
            f.write("\nCross-validation on the training split (accuracy):\n")
            for name, cv in cv_results.items():
                f.write(f"  {MODEL_LABELS.get(name, name)}: {cv['acc_mean']:.4f} +/- {cv['acc_std']:.4f} "
                        f"({cv['folds']}-fold)\n")

        f.write("\nHold-out validation:\n")
        for name, res in results.items():
            f.write(f"\n{MODEL_LABELS.get(name, name)}\n")
            f.write(f"  accuracy={res['accuracy']:.4f}, out-of-sample error={res['oos_error']:.4f}, "
                    f"kappa={res['kappa']:.4f}\n")
            f.write("  per-class error: ")
            f.write(", ".join(f"{label}={err:.4f}" for label, err in res['class_error'].items()))
            f.write("\n  confusion matrix (rows=actual, cols=predicted):\n")
            for line in res['confusion_matrix'].to_string().splitlines():
                f.write(f"    {line}\n")

        f.write(f"\nSelected model: {MODEL_LABELS.get(best_model, best_model)}\n")
        f.write("\nTest predictions:\n")
        f.write(predictions.to_string(index=False))
        f.write("\n")
    print(f"[SAVED] {out_file}")
    return out_file


def plot_confusion_matrix(cm: pd.DataFrame, title: str, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    plt.figure(figsize=(5, 4))
    sns.heatmap(cm, annot=True, fmt='d', cbar=False, cmap='Blues')
    plt.title(title)
    plt.xlabel('Predicted')
    plt.ylabel('Actual')
    plt.tight_layout()
    plt.savefig(path, dpi=150)
    plt.close()
    print(f"[SAVED] {path}")
    return path


def plot_feature_importances(importances: pd.Series, title: str, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    plt.figure(figsize=(6, max(3, 0.3 * len(importances))))
    sns.barplot(x=importances.values, y=importances.index, color='tab:blue')
    plt.title(title)
    plt.xlabel('Importance')
    plt.tight_layout()
    plt.savefig(path, dpi=150)
    plt.close()
    print(f"[SAVED] {path}")
    return path
