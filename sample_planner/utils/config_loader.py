"""
YAML configuration file loader for the sample planners.

Configuration lives in a directory holding ``environment.yaml`` (the grid,
obstacles, start and goal) and one ``<algorithm>.yaml`` per planner. Each
file wraps its content in a single top-level section.
"""

import copy
from pathlib import Path
from typing import Any, Dict

import yaml

ALGORITHM_SECTIONS = ('parameters', 'visualization', 'output')


def load_yaml_config(filepath: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filepath: Path to YAML file

    Returns:
        Dictionary containing configuration parameters ({} for an empty file)

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If file is not valid YAML
        ValueError: If the document is not a mapping
    """
    filepath = Path(filepath)

    if not filepath.exists():
        raise FileNotFoundError(f"Config file not found: {filepath}")

    with open(filepath, 'r') as f:
        try:
            config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Error parsing YAML file {filepath}: {e}")

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValueError(f"{filepath} must contain a mapping, got {type(config).__name__}")
    return config


def _load_section(filepath: Path, section: str) -> Dict[str, Any]:
    config = load_yaml_config(str(filepath))
    if section not in config:
        raise ValueError(f"{filepath} has no '{section}:' section")
    content = config[section] or {}
    if not isinstance(content, dict):
        raise ValueError(f"'{section}:' in {filepath} must be a mapping")
    return content


def load_environment_config(config_dir: str = 'configs') -> Dict[str, Any]:
    """
    Load environment configuration from YAML file.

    Args:
        config_dir: Directory containing config files (default: 'configs')

    Returns:
        Dictionary with environment parameters:
        - grid: {width, height, resolution, origin}
        - obstacle_factor, outline_map
        - start_point: {x, y} in world units
        - goal_point: {x, y} in world units
        - obstacles: List of {center, size} in world units

    Raises:
        FileNotFoundError: If environment.yaml doesn't exist
        ValueError: If the ``environment:`` section or its grid size is missing

    Example:
        >>> env = load_environment_config('configs')
        >>> env['grid']['width'], env['grid']['height']
        (40, 30)
    """
    config_path = Path(config_dir) / 'environment.yaml'
    environment = _load_section(config_path, 'environment')

    grid = environment.get('grid')
    if not isinstance(grid, dict) or 'width' not in grid or 'height' not in grid:
        raise ValueError(f"{config_path} must define grid.width and grid.height")
    return environment


def load_algorithm_config(algorithm_name: str, config_dir: str = 'configs') -> Dict[str, Any]:
    """
    Load algorithm-specific configuration from YAML file.

    The ``parameters``, ``visualization`` and ``output`` sections are always
    present in the result; sections left out of the file come back empty.

    Args:
        algorithm_name: Name of algorithm ('rrt', 'rrt_star', 'informed_rrt')
        config_dir: Directory containing config files (default: 'configs')

    Raises:
        FileNotFoundError: If algorithm config file doesn't exist
        ValueError: If the ``algorithm:`` section is missing

    Example:
        >>> rrt_config = load_algorithm_config('rrt')
        >>> rrt_config['parameters']['sample_points']
        500
    """
    config_path = Path(config_dir) / f'{algorithm_name}.yaml'
    algorithm = _load_section(config_path, 'algorithm')

    for section in ALGORITHM_SECTIONS:
        if algorithm.get(section) is None:
            algorithm[section] = {}
    return algorithm


def override_parameters(algorithm_config: Dict[str, Any], **overrides) -> Dict[str, Any]:
    """
    Copy of an algorithm configuration with some planner parameters replaced.

    Overrides set to None are ignored, so optional command-line values can
    be passed straight through.

    Example:
        >>> config = {'parameters': {'sample_points': 500, 'random_seed': 42}}
        >>> override_parameters(config, random_seed=7)['parameters']
        {'sample_points': 500, 'random_seed': 7}
    """
    config = copy.deepcopy(algorithm_config)
    parameters = config.get('parameters') or {}
    parameters.update({key: value for key, value in overrides.items() if value is not None})
    config['parameters'] = parameters
    return config
