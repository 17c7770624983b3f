"""
State Management

This module handles run configuration and metrics persistence for the
command-line runner. It provides functions to load/save a JSON
configuration and to store evaluation metrics. Trained models are never
written to disk.
"""

import json
import os
from datetime import datetime
from typing import Any, Dict, Optional

from tabknn.distance import DistanceMetric
from tabknn.errors import ArgumentError
from tabknn.number_format import NumberFormat


DEFAULT_CONFIG = {
    "class_column": -1,
    "k": 3,
    "distance_metric": "euclidean",
    "test_fraction": 0.4,
    "seed": 0,
    "header": False,
    "number_format": {}
}


def load_config(config_path: str = "./tabknn.json") -> Dict:
    """
    Load configuration from a JSON file, filling in defaults.

    Args:
        config_path (str): Path to the configuration file

    Returns:
        dict: Configuration dictionary

    Raises:
        FileNotFoundError: If config file does not exist
        json.JSONDecodeError: If config file is not valid JSON
        ValueError: If configuration fields are missing or invalid
    """
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        loaded = json.load(f)

    config = dict(DEFAULT_CONFIG)
    config.update(loaded)

    validate_config(config)

    return config


def save_config(config: Dict, config_path: str = "./tabknn.json") -> None:
    """
    Save configuration to a JSON file.

    Raises:
        IOError: If the file cannot be written
        ValueError: If configuration fields are missing or invalid
    """
    validate_config(config)

    directory = os.path.dirname(config_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(config_path, 'w', encoding='utf-8') as f:
        json.dump(config, f, indent=2)


def save_metrics(metrics: Dict[str, Any], metrics_path: str = "./metrics.json") -> None:
    """
    Save evaluation metrics to a JSON file.

    numpy arrays (e.g. the confusion matrix) are stored as nested lists. A
    timestamp is added if missing.

    Args:
        metrics (dict): Dictionary containing evaluation metrics
        metrics_path (str): Path to the metrics file
    """
    directory = os.path.dirname(metrics_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    serializable = {
        key: value.tolist() if hasattr(value, 'tolist') else value
        for key, value in metrics.items()
    }
    if 'timestamp' not in serializable:
        serializable['timestamp'] = datetime.now().isoformat()

    with open(metrics_path, 'w', encoding='utf-8') as f:
        json.dump(serializable, f, indent=2)


def load_metrics(metrics_path: str = "./metrics.json") -> Optional[Dict]:
    """
    Load metrics from a JSON file.

    Returns:
        dict or None: Metrics dictionary or None if file does not exist
    """
    if not os.path.exists(metrics_path):
        return None

    with open(metrics_path, 'r', encoding='utf-8') as f:
        return json.load(f)


def build_number_format(config: Dict) -> NumberFormat:
    """Build the NumberFormat described by config['number_format']."""
    return NumberFormat(**config.get('number_format', {}))


def validate_config(config: Dict) -> None:
    """
    Validate configuration fields.

    Raises:
        ValueError: If required fields are missing or invalid
    """
    dataset_path = config.get('dataset_path')
    if not isinstance(dataset_path, str) or not dataset_path.strip():
        raise ValueError("Configuration field 'dataset_path' must be a non-empty string")

    for field in ('class_column', 'k', 'seed'):
        if field in config and (isinstance(config[field], bool) or not isinstance(config[field], int)):
            raise ValueError(f"Configuration field '{field}' must be an integer")

    if 'k' in config and config['k'] <= 0:
        raise ValueError("Configuration field 'k' must be positive")

    if 'class_column' in config and config['class_column'] < -1:
        raise ValueError("Configuration field 'class_column' must be -1 or a column index")

    if 'test_fraction' in config:
        fraction = config['test_fraction']
        if isinstance(fraction, bool) or not isinstance(fraction, (int, float)) or not 0 <= fraction <= 1:
            raise ValueError("Configuration field 'test_fraction' must be a number between 0 and 1")

    if 'header' in config and not isinstance(config['header'], bool):
        raise ValueError("Configuration field 'header' must be a boolean")

    if 'distance_metric' in config:
        try:
            DistanceMetric.parse(config['distance_metric'])
        except ArgumentError as e:
            raise ValueError(f"Configuration field 'distance_metric' is invalid: {e}")

    number_format = config.get('number_format', {})
    if not isinstance(number_format, dict):
        raise ValueError("Configuration field 'number_format' must be a dictionary")
    try:
        NumberFormat(**number_format)
    except TypeError as e:
        raise ValueError(f"Configuration field 'number_format' has unknown keys: {e}")


def get_config_value(config: Dict, key: str, default: Any = None) -> Any:
    """
    Get a configuration value with optional default.

    Example:
        get_config_value(config, 'number_format.decimal_separator', '.')
    """
    keys = key.split('.')
    value = config

    for k in keys:
        if isinstance(value, dict) and k in value:
            value = value[k]
        else:
            return default

    return value
