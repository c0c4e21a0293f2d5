"""
Configuration Module
Project: Weight Lifting Exercise quality prediction
Purpose: Reproducibility settings - random seed, paths, file names and cleaning thresholds
"""

from pathlib import Path

# ----- Reproducibility -----
RANDOM_SEED = 12345

# ----- Paths -----
PROJECT_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = PROJECT_DIR / "data"
OUTPUT_DIR = PROJECT_DIR / "output"

TRAIN_FILE = "pml-training.csv"
TEST_FILE = "pml-testing.csv"
DATA_URLS = {
    TRAIN_FILE: "https://d396qusza40orc.cloudfront.net/predmachlearn/pml-training.csv",
    TEST_FILE: "https://d396qusza40orc.cloudfront.net/predmachlearn/pml-testing.csv",
}

# Spreadsheet artefacts in the raw export are treated as missing
NA_VALUES = ["NA", "#DIV/0!", ""]

# ----- Task -----
TARGET_COLUMN = "classe"  # A = correct, B..E = four common mistakes
ID_COLUMN = "problem_id"
EXPECTED_TEST_CASES = 20

# Row index, subject name, timestamps and window counters carry no sensor signal
BOOKKEEPING_PATTERN = r"^(X|Unnamed: 0)$|user_name|timestamp|window|problem_id"

# ----- Cleaning thresholds -----
MAX_MISSING_RATIO = 0.0   # drop any column that has a missing value
NZV_FREQ_CUT = 95 / 5     # most common / second most common value
NZV_UNIQUE_CUT = 10.0     # percent of distinct values
CORRELATION_CUTOFF = 0.90

# ----- Train/validation split -----
TRAIN_FRACTION = 0.70
CV_FOLDS = 5

# Fixed preference when two models reach the same validation accuracy
MODEL_ORDER = ["random_forest", "gradient_boosting", "decision_tree"]
