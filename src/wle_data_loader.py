"""
Data Loader Module
Project: Weight Lifting Exercise quality prediction
Purpose: Fetch, load and inspect the weight lifting sensor dataset
"""

import pandas as pd
import numpy as np
from pathlib import Path

import wle_config as config


class DataLoader:
    """Class to handle data download, loading and basic inspection"""

    def __init__(self, data_dir=config.DATA_DIR, urls=None, na_values=None, allow_download=True):
        """
        Initialize DataLoader
        Args:
            data_dir (str | Path): Path to data directory
            urls (dict): Mapping of file name -> source URL
            na_values (list): Strings that should be read as missing
            allow_download (bool): Fetch missing files from their URL
        """
        self.data_dir = Path(data_dir)
        self.urls = dict(config.DATA_URLS if urls is None else urls)
        self.na_values = list(config.NA_VALUES if na_values is None else na_values)
        self.allow_download = allow_download
        self.train_data = None
        self.test_data = None

    def download_data(self, filenames=None, force=False):
        """
        Download known CSVs that are not already in the data directory
        Args:
            filenames (list): Files to fetch (all known files if None)
            force (bool): Download even if the local file exists
        Returns:
            list: Paths of the local copies
        """
        self.data_dir.mkdir(parents=True, exist_ok=True)
        paths = []
        for filename in (self.urls if filenames is None else filenames):
            url = self.urls[filename]
            file_path = self.data_dir / filename
            if force or not file_path.exists():
                print(f"Downloading {filename} from {url}")
                # Keep the raw text as-is; NA handling happens on load
                raw = pd.read_csv(url, dtype=str, keep_default_na=False)
                raw.to_csv(file_path, index=False)
                print(f"[SAVED] {file_path} ({file_path.stat().st_size / 1024:.1f} KB)")
            paths.append(file_path)
        return paths

    def _read(self, filename):
        file_path = self.data_dir / filename

        if not file_path.exists() and self.allow_download and filename in self.urls:
            try:
                self.download_data([filename])
            except Exception as e:
                print(f"Error downloading {filename}: {e}")

        if not file_path.exists():
            print(f"File not found: {file_path}")
            return None

        data = pd.read_csv(file_path, na_values=self.na_values, keep_default_na=False,
                           low_memory=False)

        # A pandas round-trip can leave an unnamed index column behind
        unnamed = [col for col in data.columns if col.startswith("Unnamed: 0")]
        if unnamed:
            data = data.drop(columns=unnamed)

        print(f"Data loaded successfully from: {filename}")
        print(f"Shape: {data.shape}")
        return data

    def load_train_data(self, filename=config.TRAIN_FILE):
        """
        Load the labeled training dataset
        Args:
            filename (str): Name of the training data file
        Returns:
            pd.DataFrame: Loaded training data, or None when unavailable
        """
        self.train_data = self._read(filename)
        return self.train_data

    def load_test_data(self, filename=config.TEST_FILE):
        """
        Load the unlabeled test cases
        Args:
            filename (str): Name of the test data file
        Returns:
            pd.DataFrame: Loaded test data, or None when unavailable
        """
        self.test_data = self._read(filename)
        if self.test_data is not None and len(self.test_data) != config.EXPECTED_TEST_CASES:
            print(f"[WARN] Expected {config.EXPECTED_TEST_CASES} test cases, "
                  f"found {len(self.test_data)}")
        return self.test_data

    def get_basic_info(self, data=None):
        """
        Display basic information about the dataset
        Args:
            data (pd.DataFrame): Dataset to analyze (uses train_data if None)
        """
        if data is None:
            data = self.train_data

        if data is None:
            print("No data available. Please load data first.")
            return

        print("\n=== DATASET BASIC INFORMATION ===")
        print(f"Dataset shape: {data.shape}")
        print(f"Number of rows: {data.shape[0]:,}")
        print(f"Number of columns: {data.shape[1]}")

        print("\n=== COLUMN TYPES ===")
        dtype_counts = data.dtypes.astype(str).value_counts()
        for dtype, count in dtype_counts.items():
            print(f"  {dtype}: {count} columns")

        print("\n=== FIRST 5 ROWS ===")
        print(data.head())

    def check_data_quality(self, data=None):
        """
        Check data quality (missing values, duplicates, memory)
        Args:
            data (pd.DataFrame): Dataset to check (uses train_data if None)
        Returns:
            pd.Series: Missing ratio per column
        """
        if data is None:
            data = self.train_data

        if data is None:
            print("No data available. Please load data first.")
            return None

        print("\n=== DATA QUALITY ASSESSMENT ===")

        missing_ratio = data.isnull().mean()
        sparse = missing_ratio[missing_ratio > 0].sort_values(ascending=False)

        print("\n1. Missing Values Analysis:")
        if len(sparse) > 0:
            print(f"   {len(sparse)} of {data.shape[1]} columns contain missing values")
            print(f"   {int((sparse > 0.9).sum())} of them are more than 90% empty")
            print(sparse.head(10).map(lambda r: f"{r * 100:.1f}%").to_string())
        else:
            print("No missing values found!")

        duplicates = data.duplicated().sum()
        print(f"\n2. Duplicate Rows: {duplicates}")

        numeric_cols = data.select_dtypes(include=[np.number]).columns
        print(f"\n3. Numeric columns: {len(numeric_cols)} / {data.shape[1]}")

        memory_usage = data.memory_usage(deep=True).sum() / 1024**2
        print(f"\n4. Memory Usage: {memory_usage:.2f} MB")

        return missing_ratio
