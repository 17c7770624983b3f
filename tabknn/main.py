"""
Command-Line Runner

Loads a CSV dataset, randomly splits it into training and testing rows,
trains a KNN classifier and reports the accuracy on the held-out rows.

Usage:
    python -m tabknn --dataset iris.csv -k 5 --metric manhattan
    python -m tabknn --config tabknn.json --metrics-out metrics.json
"""

import argparse
import logging
import sys
from typing import Dict, List, Optional

from tabknn.classifier import KnnClassifier
from tabknn.dataset_loader import get_table_info, load_table_from_csv, split_table
from tabknn.errors import ArgumentError
from tabknn.state import DEFAULT_CONFIG, validate_config, build_number_format, load_config, save_metrics
from tabknn.utils import setup_logging


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="K-nearest-neighbors classifier for CSV data")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="JSON configuration file (command-line options override it)"
    )
    parser.add_argument(
        "--dataset",
        type=str,
        default=None,
        help="Path to the CSV dataset"
    )
    parser.add_argument(
        "--class-column",
        type=int,
        default=None,
        help="Index of the class column (default: -1, the last column)"
    )
    parser.add_argument(
        "-k",
        type=int,
        default=None,
        help="Number of neighbors (default: 3)"
    )
    parser.add_argument(
        "--metric",
        type=str,
        choices=["euclidean", "manhattan"],
        default=None,
        help="Distance metric (default: euclidean)"
    )
    parser.add_argument(
        "--test-fraction",
        type=float,
        default=None,
        help="Fraction of rows held out for testing (default: 0.4)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for the split (default: 0)"
    )
    parser.add_argument(
        "--header",
        action="store_true",
        default=None,
        help="Treat the first CSV line as column labels"
    )
    parser.add_argument(
        "--metrics-out",
        type=str,
        default=None,
        help="Write the evaluation metrics to this JSON file"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (default: INFO)"
    )
    return parser


def resolve_config(args: argparse.Namespace) -> Dict:
    """
    Merge the optional config file with command-line overrides.

    Raises:
        ValueError: If the resulting configuration is invalid
    """
    if args.config:
        config = load_config(args.config)
    else:
        config = dict(DEFAULT_CONFIG)

    overrides = {
        "dataset_path": args.dataset,
        "class_column": args.class_column,
        "k": args.k,
        "distance_metric": args.metric,
        "test_fraction": args.test_fraction,
        "seed": args.seed,
        "header": args.header,
    }
    for key, value in overrides.items():
        if value is not None:
            config[key] = value

    validate_config(config)
    return config


def run(config: Dict) -> Dict:
    """
    Load, split, train and evaluate as described by `config`.

    Returns:
        Evaluation metrics (see KnnClassifier.evaluate) plus the split sizes
    """
    table = load_table_from_csv(
        config["dataset_path"],
        number_format=build_number_format(config),
        header=config["header"]
    )
    info = get_table_info(table, config["class_column"])
    logger.info(f"Dataset: {info['row_count']} rows, {info['field_count']} fields, "
                f"{len(info['class_counts'])} classes")

    if table.field_count < 3:
        raise ArgumentError("Dataset must have at least three fields")

    model = KnnClassifier.from_config(config)
    train_table, test_table, train_indices, test_indices = split_table(
        table, config["test_fraction"], config["seed"]
    )
    model.train(train_table, config["class_column"])
    metrics = model.evaluate(test_table, config["class_column"])
    metrics["n_train"] = len(train_indices)
    metrics["n_test"] = len(test_indices)
    return metrics


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        config = resolve_config(args)
        metrics = run(config)
    except (OSError, ValueError, IndexError, RuntimeError) as e:
        logger.error(f"Run failed: {e}")
        return 1

    logger.info(f"Accuracy: {metrics['accuracy'] * 100:.2f}% "
                f"({metrics['n_train']} train / {metrics['n_test']} test rows)")
    print(f"{metrics['accuracy']:.4f}")

    if args.metrics_out:
        save_metrics(metrics, args.metrics_out)
        logger.info(f"Metrics saved to {args.metrics_out}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
