import pandas as pd
import pytest

from wle_report import (plot_confusion_matrix, plot_feature_importances, write_metrics_summary,
                        write_prediction_files, write_predictions_csv)


def test_write_prediction_files_one_per_case(tmp_path):
    paths = write_prediction_files(["B", "A", "E"], tmp_path / "answers")

    assert [p.name for p in paths] == ["problem_id_1.txt", "problem_id_2.txt", "problem_id_3.txt"]
    assert [p.read_text() for p in paths] == ["B\n", "A\n", "E\n"]


def test_write_prediction_files_uses_problem_ids(tmp_path):
    paths = write_prediction_files(pd.Series(["C", "D"]), tmp_path, problem_ids=[7, 20])

    assert (tmp_path / "problem_id_7.txt").read_text() == "C\n"
    assert (tmp_path / "problem_id_20.txt").read_text() == "D\n"
    assert len(paths) == 2


def test_write_prediction_files_length_mismatch(tmp_path):
    with pytest.raises(ValueError):
        write_prediction_files(["A"], tmp_path, problem_ids=[1, 2])


def test_write_predictions_csv(tmp_path):
    frame = pd.DataFrame({"problem_id": [1, 2], "classe": ["A", "B"]})

    path = write_predictions_csv(frame, tmp_path / "out" / "predictions.csv")

    assert pd.read_csv(path).equals(frame)


def test_write_metrics_summary(tmp_path):
    cm = pd.DataFrame([[3, 1], [0, 4]], index=["A", "B"], columns=["A", "B"])
    results = {
        "random_forest": {
            "accuracy": 0.875, "oos_error": 0.125, "kappa": 0.75,
            "class_error": {"A": 0.25, "B": 0.0}, "confusion_matrix": cm,
        },
    }

    path = write_metrics_summary(
        tmp_path / "metrics_summary.txt",
        shapes={"test": (20, 160)},
        dropped={"sparse": ["kurtosis_roll_belt"]},
        cv_results={"random_forest": {"acc_mean": 0.9, "acc_std": 0.01, "folds": 5}},
        results=results,
        best_model="random_forest",
        predictions=pd.DataFrame({"problem_id": [1], "classe": ["A"]}),
    )

    text = path.read_text()
    assert "test: 20 rows x 160 columns" in text
    assert "sparse: 1 columns removed" in text
    assert "Random Forest: 0.9000 +/- 0.0100 (5-fold)" in text
    assert "out-of-sample error=0.1250" in text
    assert "Selected model: Random Forest" in text


def test_plots_are_saved(tmp_path):
    cm = pd.DataFrame([[3, 1], [0, 4]], index=["A", "B"], columns=["A", "B"])
    imp = pd.Series([0.6, 0.4], index=["roll_belt", "yaw_arm"])

    cm_path = plot_confusion_matrix(cm, "cm", tmp_path / "plots" / "cm.png")
    imp_path = plot_feature_importances(imp, "imp", tmp_path / "plots" / "imp.png")

    assert cm_path.exists() and cm_path.stat().st_size > 0
    assert imp_path.exists() and imp_path.stat().st_size > 0
