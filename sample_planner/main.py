"""
Main entry point for the sample-based planners.

This CLI runs RRT, RRT* or Informed RRT* on the environment described by the
YAML configuration files.
"""

import argparse
import logging
from pathlib import Path
from typing import Optional

import matplotlib.pyplot as plt

from .algorithms import ALGORITHM_MAP, PlanResult, create_planner
from .core.errors import InvalidInput
from .core.occupancy_grid import OccupancyGrid
from .utils.config_loader import load_algorithm_config, load_environment_config, override_parameters


def run_planner(algorithm_name: str, config_dir: str = 'configs', visualize: bool = True,
                save: bool = False, seed: Optional[int] = None) -> Optional[PlanResult]:
    """
    Run a sample-based planner.

    Args:
        algorithm_name: Name of algorithm ('rrt', 'rrt_star', 'informed_rrt')
        config_dir: Directory containing configuration files
        visualize: Whether to show visualization
        save: Whether to save output files
        seed: Overrides the configured random_seed when given

    Returns:
        The planning result, or None if the request was rejected
    """
    if algorithm_name not in ALGORITHM_MAP:
        print(f"Error: Unknown algorithm '{algorithm_name}'")
        print(f"Available algorithms: {', '.join(ALGORITHM_MAP.keys())}")
        return None

    print(f"\n{'='*60}")
    print(f"Running {algorithm_name.upper()} Path Planning Algorithm")
    print(f"{'='*60}\n")

    # Load configurations
    print("Loading configurations...")
    env_config = load_environment_config(config_dir)
    alg_config = override_parameters(load_algorithm_config(algorithm_name, config_dir),
                                     random_seed=seed)

    # Create grid
    grid = OccupancyGrid.from_config(env_config)
    print(f"Grid: {grid.width}x{grid.height} cells at {grid.resolution} m/cell")

    # Get start and goal
    try:
        start = grid.world_to_map(env_config['start_point']['x'], env_config['start_point']['y'])
        goal = grid.world_to_map(env_config['goal_point']['x'], env_config['goal_point']['y'])
    except ValueError as e:
        print(f"Error: {e}")
        return None
    print(f"Start: {start}")
    print(f"Goal: {goal}")

    # Create planner
    planner = create_planner(algorithm_name, grid, alg_config)
    print(f"Planner: {planner}")

    # Plan path
    print("\nPlanning path...")
    try:
        result = planner.plan(start, goal)
    except InvalidInput as e:
        print(f"Error: {e}")
        return None

    # Display metrics
    print("\n" + "="*60)
    print("Results:")
    print("="*60)
    for key, value in planner.get_metrics().items():
        print(f"  {key}: {value}")
    print("="*60 + "\n")

    if not result.found:
        print("No path found!")
        return result

    print(f"Path found with {len(result.path)} waypoints")

    if save:
        output_config = alg_config['output']
        save_path = Path(output_config.get('save_path', f'outputs/{algorithm_name}/'))
        save_path.mkdir(parents=True, exist_ok=True)

        path_file = save_path / 'path.json'
        planner.save_path(str(path_file))
        print(f"Path data saved to: {path_file}")

    # Visualize
    if visualize or save:
        fig, ax = plt.subplots(figsize=(10, 8))
        planner.visualize(ax)
        plt.tight_layout()

        if save:
            plot_file = save_path / output_config.get('plot_filename', 'path_plot.png')
            plt.savefig(plot_file, dpi=150, bbox_inches='tight')
            print(f"Plot saved to: {plot_file}")

        if visualize:
            plt.show()
        plt.close(fig)

    return result


def main():
    """Main entry point with command-line argument parsing."""
    parser = argparse.ArgumentParser(
        description='Sample-based grid path planners',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run RRT
  sample-planner --algorithm rrt

  # Run Informed RRT* and save results
  sample-planner --algorithm informed_rrt --save

  # Run RRT* without visualization and a fixed seed
  sample-planner --algorithm rrt_star --no-viz --seed 7

  # Use custom config directory
  sample-planner --algorithm rrt --config-dir ../my_configs
        """
    )

    parser.add_argument(
        '--algorithm', '-a',
        type=str,
        choices=list(ALGORITHM_MAP.keys()),
        required=True,
        help='Path planning algorithm to use'
    )

    parser.add_argument(
        '--config-dir', '-c',
        type=str,
        default='configs',
        help='Directory containing YAML configuration files (default: configs)'
    )

    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help='Random seed (overrides the configured random_seed)'
    )

    parser.add_argument(
        '--save', '-s',
        action='store_true',
        help='Save output files (plot and path)'
    )

    parser.add_argument(
        '--no-viz',
        action='store_true',
        help='Disable visualization'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable debug logging'
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(name)s %(levelname)s: %(message)s'
    )

    run_planner(
        algorithm_name=args.algorithm,
        config_dir=args.config_dir,
        visualize=not args.no_viz,
        save=args.save,
        seed=args.seed
    )


if __name__ == '__main__':
    main()
