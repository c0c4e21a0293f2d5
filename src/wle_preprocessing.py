"""
Data Preprocessing Module
Project: Weight Lifting Exercise quality prediction
Purpose: Reduce the raw sensor export to a compact set of informative predictors
"""

import re

import pandas as pd
import numpy as np

import wle_config as config


class DataPreprocessor:
    """Class to handle column filtering for the sensor dataset"""

    def __init__(self, target_column=config.TARGET_COLUMN, id_column=config.ID_COLUMN):
        """
        Initialize DataPreprocessor
        Args:
            target_column (str): Name of the label column, never dropped
            id_column (str): Name of the test-case id column
        """
        self.target_column = target_column
        self.id_column = id_column
        self.feature_columns = None
        self.dropped = {}

    def _predictors(self, data):
        return [col for col in data.columns if col != self.target_column]

    def _check_not_empty(self, data, step):
        if not self._predictors(data):
            raise ValueError(f"No predictors left after {step}")

    def drop_sparse_columns(self, data, max_missing_ratio=config.MAX_MISSING_RATIO):
        """
        Remove columns that are mostly (or partly) empty

        EXPLANATION: The raw export carries ~100 summary-statistic columns
        (kurtosis, skewness, max, min, amplitude, var, avg, stddev ...) that are
        only filled on the row that closes a sliding window. They are missing
        for about 98% of rows and cannot be used for row-level prediction.

        Args:
            data (pd.DataFrame): Input dataset
            max_missing_ratio (float): Columns with a larger missing ratio are dropped
        Returns:
            pd.DataFrame: Dataset without sparse columns
        """
        if not 0.0 <= max_missing_ratio <= 1.0:
            raise ValueError("max_missing_ratio must be between 0 and 1")

        print(f"\nDropping columns with more than {max_missing_ratio * 100:.0f}% missing values")

        missing_ratio = data.isnull().mean()
        to_drop = [col for col, ratio in missing_ratio.items()
                   if ratio > max_missing_ratio and col != self.target_column]

        self.dropped['sparse'] = to_drop
        print(f"  Removed {len(to_drop)} sparse columns")

        processed_data = data.drop(columns=to_drop)
        self._check_not_empty(processed_data, "sparse column removal")
        return processed_data

    def drop_bookkeeping_columns(self, data, pattern=config.BOOKKEEPING_PATTERN):
        """
        Remove identifier, timestamp and window columns by name pattern
        Args:
            data (pd.DataFrame): Input dataset
            pattern (str): Regular expression matched against column names
        Returns:
            pd.DataFrame: Dataset without bookkeeping columns
        """
        print(f"\nDropping bookkeeping columns matching /{pattern}/")

        regex = re.compile(pattern)
        to_drop = [col for col in data.columns
                   if regex.search(col) and col != self.target_column]

        self.dropped['bookkeeping'] = to_drop
        print(f"  Removed {len(to_drop)} columns: {to_drop}")

        processed_data = data.drop(columns=to_drop)
        self._check_not_empty(processed_data, "bookkeeping column removal")
        return processed_data

    def near_zero_variance(self, data, freq_cut=config.NZV_FREQ_CUT, unique_cut=config.NZV_UNIQUE_CUT):
        """
        Compute near-zero-variance diagnostics for every predictor

        A predictor is flagged when it has a single distinct value, or when the
        most common value is more than `freq_cut` times as frequent as the
        second most common AND distinct values make up at most `unique_cut`
        percent of the rows.

        Args:
            data (pd.DataFrame): Input dataset
            freq_cut (float): Cut-off for the frequency ratio
            unique_cut (float): Cut-off for the percent of unique values
        Returns:
            pd.DataFrame: freq_ratio, percent_unique, zero_var, nzv per predictor
        """
        rows = []
        n_rows = len(data)
        for col in self._predictors(data):
            counts = data[col].value_counts(dropna=True)
            freq_ratio = counts.iloc[0] / counts.iloc[1] if len(counts) > 1 else 0.0
            percent_unique = 100.0 * data[col].nunique(dropna=True) / n_rows if n_rows else 0.0
            zero_var = len(counts) < 2
            nzv = zero_var or (freq_ratio > freq_cut and percent_unique <= unique_cut)
            rows.append({
                'column': col,
                'freq_ratio': float(freq_ratio),
                'percent_unique': float(percent_unique),
                'zero_var': bool(zero_var),
                'nzv': bool(nzv),
            })

        return pd.DataFrame(rows, columns=['column', 'freq_ratio', 'percent_unique', 'zero_var', 'nzv']) \
            .set_index('column')

    def drop_near_zero_variance(self, data, freq_cut=config.NZV_FREQ_CUT, unique_cut=config.NZV_UNIQUE_CUT):
        """
        Remove near-zero-variance predictors
        Args:
            data (pd.DataFrame): Input dataset
        Returns:
            pd.DataFrame: Dataset without near-constant predictors
        """
        print(f"\nDropping near-zero-variance predictors (freq_cut={freq_cut:.1f}, unique_cut={unique_cut})")

        nzv = self.near_zero_variance(data, freq_cut, unique_cut)
        to_drop = nzv.index[nzv['nzv']].tolist()

        self.dropped['near_zero_variance'] = to_drop
        print(f"  Removed {len(to_drop)} columns: {to_drop}")

        processed_data = data.drop(columns=to_drop)
        self._check_not_empty(processed_data, "near-zero-variance filtering")
        return processed_data

    def find_correlated(self, data, cutoff=config.CORRELATION_CUTOFF):
        """
        Find numeric predictors to remove so no kept pair exceeds the cut-off

        Columns are visited in decreasing order of mean absolute correlation.
        For every pair of still-kept columns above the cut-off, the one with
        the larger mean absolute correlation (against the kept columns) goes.

        Args:
            data (pd.DataFrame): Input dataset
            cutoff (float): Absolute Pearson correlation threshold
        Returns:
            list: Column names to remove
        """
        if not 0.0 < cutoff <= 1.0:
            raise ValueError("cutoff must be in (0, 1]")

        numeric_cols = data[self._predictors(data)].select_dtypes(include=[np.number]).columns.tolist()
        if len(numeric_cols) < 2:
            return []

        corr = data[numeric_cols].corr().abs().to_numpy()
        corr = np.nan_to_num(corr, nan=0.0)
        np.fill_diagonal(corr, np.nan)

        order = np.argsort(-np.nanmean(corr, axis=0), kind='stable')
        corr = corr[np.ix_(order, order)]
        names = [numeric_cols[k] for k in order]

        n_cols = len(names)
        drop = np.zeros(n_cols, dtype=bool)
        for i in range(n_cols - 1):
            for j in range(i + 1, n_cols):
                if drop[i]:
                    break
                if drop[j] or not corr[i, j] > cutoff:
                    continue
                keep = ~drop
                mean_i = np.nanmean(corr[i, keep])
                mean_j = np.nanmean(corr[j, keep])
                if mean_i > mean_j:
                    drop[i] = True
                else:
                    drop[j] = True

        # Report in the original column order
        dropped = set(name for name, flag in zip(names, drop) if flag)
        return [col for col in numeric_cols if col in dropped]

    def drop_correlated(self, data, cutoff=config.CORRELATION_CUTOFF):
        """
        Remove highly correlated predictors
        Args:
            data (pd.DataFrame): Input dataset
            cutoff (float): Absolute correlation threshold
        Returns:
            pd.DataFrame: Dataset with correlated predictors pruned
        """
        print(f"\nPruning predictors with |r| > {cutoff}")

        to_drop = self.find_correlated(data, cutoff)

        self.dropped['correlated'] = to_drop
        print(f"  Removed {len(to_drop)} columns: {to_drop}")

        processed_data = data.drop(columns=to_drop)
        self._check_not_empty(processed_data, "correlation pruning")
        return processed_data

    def fit_transform(self, data, max_missing_ratio=config.MAX_MISSING_RATIO,
                      correlation_cutoff=config.CORRELATION_CUTOFF):
        """
        Run the full cleaning sequence on the training data and remember the kept columns
        Args:
            data (pd.DataFrame): Raw training dataset with the target column
        Returns:
            pd.DataFrame: Kept predictors followed by the target column
        """
        if self.target_column not in data.columns:
            raise KeyError(f"Target column '{self.target_column}' not found")

        print("\n=== CLEANING PREDICTORS ===")
        self.dropped = {}

        processed_data = self.drop_sparse_columns(data, max_missing_ratio)
        processed_data = self.drop_bookkeeping_columns(processed_data)
        processed_data = self.drop_near_zero_variance(processed_data)
        processed_data = self.drop_correlated(processed_data, correlation_cutoff)

        self.feature_columns = self._predictors(processed_data)
        return processed_data[self.feature_columns + [self.target_column]]

    def transform(self, data):
        """
        Select the kept predictors from another dataset (e.g. the test cases)
        Args:
            data (pd.DataFrame): Dataset with at least the kept predictor columns
        Returns:
            pd.DataFrame: Kept predictors, plus the id column when present
        """
        if self.feature_columns is None:
            raise ValueError("fit_transform must be called before transform")

        missing = [col for col in self.feature_columns if col not in data.columns]
        if missing:
            raise KeyError(f"Columns missing from dataset: {missing}")

        columns = list(self.feature_columns)
        if self.id_column in data.columns:
            columns.append(self.id_column)
        return data[columns].copy()

    def get_preprocessing_summary(self, original_data, processed_data):
        """
        Print a summary of the cleaning steps
        Args:
            original_data (pd.DataFrame): Original dataset
            processed_data (pd.DataFrame): Processed dataset
        """
        print(f"\n=== PREPROCESSING SUMMARY ===")
        print(f"Original shape: {original_data.shape}")
        print(f"Final shape: {processed_data.shape}")
        for step, columns in self.dropped.items():
            print(f"  {step}: {len(columns)} columns removed")
        if self.feature_columns is not None:
            print(f"Predictors kept: {len(self.feature_columns)}")
