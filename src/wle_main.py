"""
Main Analysis Pipeline
Project: Weight Lifting Exercise quality prediction
Purpose: Run the complete analysis - load, clean, split, fit, evaluate, predict, write outputs
"""

import argparse
import sys
import warnings
from pathlib import Path

import pandas as pd

import wle_config as config
from wle_data_loader import DataLoader
from wle_preprocessing import DataPreprocessor
from wle_eda_analysis import EDAAnalyzer
from wle_modeling import ModelTrainer, MODEL_LABELS, split_data
from wle_report import (write_prediction_files, write_predictions_csv, write_metrics_summary,
                        plot_confusion_matrix, plot_feature_importances)


def _ratio(value):
    ratio = float(value)
    if not 0.0 <= ratio <= 1.0:
        raise argparse.ArgumentTypeError(f"{value} is not between 0 and 1")
    return ratio


def _fraction(value):
    fraction = float(value)
    if not 0.0 < fraction < 1.0:
        raise argparse.ArgumentTypeError(f"{value} is not strictly between 0 and 1")
    return fraction


def _cutoff(value):
    cutoff = float(value)
    if not 0.0 < cutoff <= 1.0:
        raise argparse.ArgumentTypeError(f"{value} is not in (0, 1]")
    return cutoff


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        description="Predict weight lifting execution quality (classe A-E) from wearable sensor data.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    p.add_argument("--data-dir", type=Path, default=config.DATA_DIR, help="Directory holding the CSV files.")
    p.add_argument("--output-dir", type=Path, default=config.OUTPUT_DIR, help="Directory for answers and report.")
    p.add_argument("--seed", type=int, default=config.RANDOM_SEED, help="Random seed.")
    p.add_argument("--train-fraction", type=_fraction, default=config.TRAIN_FRACTION,
                   help="Share of labeled rows used for training; the rest is held out.")
    p.add_argument("--cv-folds", type=int, default=config.CV_FOLDS, help="Folds for cross-validation.")
    p.add_argument("--correlation-cutoff", type=_cutoff, default=config.CORRELATION_CUTOFF,
                   help="Prune predictors whose pairwise |r| exceeds this value.")
    p.add_argument("--max-missing-ratio", type=_ratio, default=config.MAX_MISSING_RATIO,
                   help="Drop columns with a larger share of missing values.")
    p.add_argument("--no-download", action="store_true", help="Never fetch missing CSV files.")
    p.add_argument("--no-plots", action="store_true", help="Skip figure generation.")
    p.add_argument("--skip-cv", action="store_true", help="Skip K-fold cross-validation on the training split.")
    args = p.parse_args(argv)
    if args.cv_folds < 2:
        p.error("--cv-folds must be at least 2")
    return args


def run(data_dir=config.DATA_DIR, output_dir=config.OUTPUT_DIR, seed=config.RANDOM_SEED,
        train_fraction=config.TRAIN_FRACTION, cv_folds=config.CV_FOLDS,
        correlation_cutoff=config.CORRELATION_CUTOFF, max_missing_ratio=config.MAX_MISSING_RATIO,
        download=True, plots=True, cross_validate=True):
    """
    Run the complete pipeline
    Returns:
        dict: metrics, chosen model and test predictions, or None when data is unavailable
    """
    output_dir = Path(output_dir)

    print("Weight Lifting Exercise - Execution Quality Prediction")
    print("=" * 60)

    # Step 1: Load the data
    print("\n1. Loading data...")
    loader = DataLoader(data_dir, allow_download=download)
    train = loader.load_train_data()
    test = loader.load_test_data()

    if train is None or test is None:
        print(f"Failed to load data. Place {config.TRAIN_FILE} and {config.TEST_FILE} in {data_dir}.")
        return None

    loader.get_basic_info(train)
    loader.check_data_quality(train)

    # Step 2: Clean predictors
    print("\n2. Cleaning predictors...")
    preprocessor = DataPreprocessor()
    clean = preprocessor.fit_transform(train, max_missing_ratio=max_missing_ratio,
                                       correlation_cutoff=correlation_cutoff)
    test_clean = preprocessor.transform(test)
    preprocessor.get_preprocessing_summary(train, clean)

    eda = EDAAnalyzer(output_dir / "plots")
    eda.basic_data_overview(clean)
    if plots:
        eda.plot_class_distribution(clean)
        eda.correlation_heatmap(clean)
        eda.feature_boxplots(clean)

    # Step 3: Partition
    print("\n3. Partitioning data...")
    X_train, X_valid, y_train, y_valid = split_data(clean, train_fraction=train_fraction, seed=seed)
    print(f"Training rows: {len(X_train)}, validation rows: {len(X_valid)}")

    # Step 4: Fit and cross-validate
    print("\n4. Fitting models...")
    trainer = ModelTrainer(seed=seed)
    if cross_validate:
        trainer.cross_validate_all(X_train, y_train, folds=cv_folds)
    trainer.fit(X_train, y_train)

    # Step 5: Hold-out evaluation
    print("\n5. Evaluating on the held-out split...")
    results = trainer.evaluate(X_valid, y_valid)
    best = trainer.best_model_name()
    print(f"\nSelected model: {MODEL_LABELS[best]} "
          f"(accuracy={results[best]['accuracy']:.4f}, "
          f"expected out-of-sample error={results[best]['oos_error']:.4f})")

    if plots:
        for name, res in results.items():
            plot_confusion_matrix(res['confusion_matrix'], f'Confusion Matrix - {MODEL_LABELS[name]}',
                                  output_dir / "plots" / f"cm_{name}.png")
        importances = trainer.feature_importances(best, preprocessor.feature_columns)
        plot_feature_importances(importances, f'Top Features - {MODEL_LABELS[best]}',
                                 output_dir / "plots" / f"importances_{best}.png")

    # Step 6: Predict the test cases
    print("\n6. Predicting test cases...")
    X_test = test_clean[preprocessor.feature_columns]
    predicted = trainer.predict(X_test)
    if config.ID_COLUMN in test_clean.columns:
        problem_ids = test_clean[config.ID_COLUMN].astype(int).tolist()
    else:
        problem_ids = list(range(1, len(test_clean) + 1))

    predictions = pd.DataFrame({config.ID_COLUMN: problem_ids})
    for name in predicted.columns:
        predictions[name] = predicted[name].to_numpy()
    predictions[config.TARGET_COLUMN] = predictions[best]

    agree = (predicted.nunique(axis=1) == 1).sum()
    print(f"All models agree on {agree} of {len(predicted)} test cases")
    print(predictions.to_string(index=False))

    # Step 7: Write outputs
    print("\n7. Writing outputs...")
    answer_files = write_prediction_files(predictions[config.TARGET_COLUMN], output_dir / "answers", problem_ids)
    write_predictions_csv(predictions, output_dir / "predictions.csv")
    write_metrics_summary(
        output_dir / "metrics_summary.txt",
        shapes={'training (raw)': train.shape, 'training (clean)': clean.shape, 'test': test.shape},
        dropped=preprocessor.dropped,
        cv_results=trainer.cv_results,
        results=results,
        best_model=best,
        predictions=predictions,
    )

    return {
        'feature_columns': list(preprocessor.feature_columns),
        'cv_results': trainer.cv_results,
        'results': results,
        'best_model': best,
        'predictions': predictions,
        'answer_files': answer_files,
    }


def main(argv=None):
    warnings.filterwarnings('ignore')
    args = parse_args(argv)
    result = run(
        data_dir=args.data_dir,
        output_dir=args.output_dir,
        seed=args.seed,
        train_fraction=args.train_fraction,
        cv_folds=args.cv_folds,
        correlation_cutoff=args.correlation_cutoff,
        max_missing_ratio=args.max_missing_ratio,
        download=not args.no_download,
        plots=not args.no_plots,
        cross_validate=not args.skip_cv,
    )
    if result is None:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
