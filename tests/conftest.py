"""Shared fixtures: small synthetic frames shaped like the weight lifting sensor export."""

import numpy as np
import pandas as pd
import pytest

CLASSES = ["A", "B", "C", "D", "E"]
SENSORS = ["roll_belt", "pitch_forearm", "yaw_arm", "magnet_dumbbell_z", "accel_forearm_x", "gyros_belt_z"]


def make_frame(n_per_class=50, seed=0, labeled=True):
    rng = np.random.default_rng(seed)
    n_rows = n_per_class * len(CLASSES)
    class_idx = np.repeat(np.arange(len(CLASSES)), n_per_class)

    data = {
        "X": np.arange(1, n_rows + 1),
        "user_name": np.resize(["carlitos", "pedro", "adelmo", "charles", "eurico", "jeremy"], n_rows),
        "raw_timestamp_part_1": 1322489729 + np.arange(n_rows),
        "raw_timestamp_part_2": rng.integers(0, 999999, n_rows),
        "cvtd_timestamp": np.resize(["28/11/2011 14:13", "05/12/2011 11:23"], n_rows),
        "new_window": np.where(np.arange(n_rows) % 25 == 0, "yes", "no"),
        "num_window": np.arange(n_rows) // 25 + 1,
    }

    # Each sensor separates the classes in a different order
    for sensor in SENSORS:
        offsets = rng.permutation(len(CLASSES)) * 1.5
        data[sensor] = offsets[class_idx] + rng.normal(0.0, 1.0, n_rows)

    data["total_accel_belt"] = 2.0 * data["roll_belt"] + rng.normal(0.0, 0.01, n_rows)

    # Mostly zero with a handful of ones
    gyros = np.zeros(n_rows)
    gyros[:5] = 1.0
    data["gyros_forearm_z"] = gyros
    data["amplitude_yaw_belt"] = np.zeros(n_rows)

    # Window summaries are only filled on window-closing rows
    kurtosis = np.full(n_rows, np.nan)
    kurtosis[::25] = rng.normal(0.0, 1.0, len(kurtosis[::25]))
    data["kurtosis_roll_belt"] = kurtosis
    data["max_roll_belt"] = kurtosis * 3.0

    frame = pd.DataFrame(data)
    if labeled:
        frame["classe"] = np.array(CLASSES)[class_idx]
    else:
        frame["problem_id"] = np.arange(1, n_rows + 1)
    return frame


@pytest.fixture
def wle_frame():
    return make_frame()


@pytest.fixture
def wle_test_frame():
    return make_frame(n_per_class=4, seed=1, labeled=False)


@pytest.fixture
def data_dir(tmp_path, wle_frame, wle_test_frame):
    """Directory with both CSV files written the way the raw export looks."""
    path = tmp_path / "data"
    path.mkdir()
    for frame, name in [(wle_frame, "pml-training.csv"), (wle_test_frame, "pml-testing.csv")]:
        raw = frame.astype(object).where(frame.notna(), "NA")
        raw.loc[raw.index[1], "kurtosis_roll_belt"] = "#DIV/0!"
        raw.loc[raw.index[2], "max_roll_belt"] = ""
        raw.insert(0, "", range(1, len(raw) + 1))
        raw.to_csv(path / name, index=False)
    return path
