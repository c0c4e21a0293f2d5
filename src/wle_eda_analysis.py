"""
Exploratory Data Analysis (EDA) Module
Project: Weight Lifting Exercise quality prediction
Purpose: Summarise the class balance and the relationships among the kept sensor features
"""

from pathlib import Path

import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import seaborn as sns

import wle_config as config


class EDAAnalyzer:
    """
    Class to produce the exploratory figures for the report
    """

    def __init__(self, output_dir=config.OUTPUT_DIR / "plots", figsize=(10, 6)):
        """
        Initialize EDA Analyzer with basic matplotlib settings
        """
        self.output_dir = Path(output_dir)
        self.figsize = figsize
        plt.rcParams['figure.figsize'] = figsize
        plt.rcParams['font.size'] = 10

    def _save(self, filename):
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / filename
        plt.tight_layout()
        plt.savefig(path, dpi=150)
        plt.close()
        print(f"[SAVED] {path}")
        return path

    def basic_data_overview(self, data, target_column=config.TARGET_COLUMN):
        """
        Print shape and target distribution
        Returns:
            pd.Series: Share of each class in percent
        """
        print("=" * 60)
        print("BASIC DATA OVERVIEW")
        print("=" * 60)

        print(f"Dataset shape: {data.shape}")
        print(f"Number of rows: {data.shape[0]:,}")
        print(f"Number of predictors: {data.shape[1] - 1}")

        if target_column not in data.columns:
            print(f"Target column '{target_column}' not found in dataset.")
            return None

        print(f"\nTarget variable '{target_column}' distribution:")
        percentages = data[target_column].value_counts(normalize=True).sort_index() * 100
        for value, percentage in percentages.items():
            print(f"  {value}: {percentage:.1f}%")
        return percentages

    def plot_class_distribution(self, data, target_column=config.TARGET_COLUMN):
        """Bar chart of row counts per class"""
        counts = data[target_column].value_counts().sort_index()
        plt.figure(figsize=(6, 4))
        sns.barplot(x=counts.index.astype(str), y=counts.values, color='tab:blue')
        plt.title(f'{target_column} distribution')
        plt.xlabel(target_column)
        plt.ylabel('Count')
        return self._save('class_distribution.png')

    def correlation_heatmap(self, data, target_column=config.TARGET_COLUMN):
        """
        Heatmap of pairwise correlations among the numeric predictors

        Useful to confirm that pruning left no strongly redundant pairs
        """
        numerical_cols = data.drop(columns=[target_column], errors='ignore') \
            .select_dtypes(include=[np.number]).columns

        if len(numerical_cols) < 2:
            print("Need at least 2 numerical features for correlation analysis.")
            return None

        corr_matrix = data[numerical_cols].corr()
        upper = corr_matrix.where(np.triu(np.ones(corr_matrix.shape, dtype=bool), k=1))
        print(f"Largest remaining |r|: {np.nanmax(upper.abs().to_numpy()):.3f}")

        size = max(6, 0.25 * len(numerical_cols))
        plt.figure(figsize=(size, size))
        sns.heatmap(corr_matrix, cmap='coolwarm', vmin=-1, vmax=1, square=True,
                    xticklabels=True, yticklabels=True, cbar_kws={'shrink': 0.6})
        plt.title('Correlation Matrix of Kept Predictors')
        return self._save('correlation_heatmap.png')

    def top_separating_features(self, data, target_column=config.TARGET_COLUMN, top_n=6):
        """
        Rank numeric predictors by how much their class means differ

        Score: standard deviation of the per-class means divided by the overall
        standard deviation.
        """
        numerical_cols = data.drop(columns=[target_column], errors='ignore') \
            .select_dtypes(include=[np.number]).columns
        class_means = data.groupby(target_column)[list(numerical_cols)].mean()
        overall_std = data[numerical_cols].std().replace(0, np.nan)
        score = (class_means.std() / overall_std).dropna()
        return score.sort_values(ascending=False).head(top_n)

    def feature_boxplots(self, data, target_column=config.TARGET_COLUMN, features=None, top_n=6):
        """Per-class box plots for the most separating features"""
        if features is None:
            features = self.top_separating_features(data, target_column, top_n).index.tolist()
        if len(features) == 0:
            print("No features to plot.")
            return None

        n_cols = min(3, len(features))
        n_rows = (len(features) + n_cols - 1) // n_cols
        fig, axes = plt.subplots(n_rows, n_cols, figsize=(4 * n_cols, 3.5 * n_rows), squeeze=False)
        axes = axes.flatten()
        for i, feature in enumerate(features):
            sns.boxplot(data=data, x=target_column, y=feature, ax=axes[i],
                        order=sorted(data[target_column].unique()))
            axes[i].set_title(feature)
        for i in range(len(features), len(axes)):
            fig.delaxes(axes[i])
        return self._save('feature_boxplots.png')
