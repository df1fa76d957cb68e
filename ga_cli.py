#!/usr/bin/env python3
"""
GA Optimizer - command-line entry point.

Runs a continuous or permutation optimization described by a YAML run
configuration and writes the score history and best solution.
"""

import argparse
import sys
from pathlib import Path

# Add current directory to path for imports
sys.path.append(str(Path(__file__).parent))

from ga_core.cli import load_run_config, run_from_config, validate_run_config


def main():
    """Main entry point with command-line argument parsing"""
    parser = argparse.ArgumentParser(
        description="GA Optimizer - continuous and permutation search",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python3 ga_cli.py examples/rosenbrock_run.yaml          # Minimize Rosenbrock on [-3, 3]^2
  python3 ga_cli.py examples/tsp_run.yaml                 # 10-city tour search
  python3 ga_cli.py examples/tsp_run.yaml --seed 11       # Override the random seed
  python3 ga_cli.py examples/tsp_run.yaml -o out/tsp      # Write results to out/tsp
  python3 ga_cli.py examples/tsp_run.yaml --check         # Validate config only
        """
    )

    parser.add_argument(
        'config',
        help='Run configuration file path'
    )

    parser.add_argument(
        '--seed', '-s',
        type=int,
        metavar='N',
        help='Override random_seed from the config'
    )

    parser.add_argument(
        '--output', '-o',
        type=str,
        metavar='DIR',
        help='Override output.root from the config (overwrites existing files)'
    )

    parser.add_argument(
        '--check',
        action='store_true',
        help='Validate the configuration and exit'
    )

    args = parser.parse_args()

    overrides = {}
    if args.seed is not None:
        overrides['random_seed'] = args.seed
    if args.output:
        overrides['output'] = {'root': args.output, 'overwrite': True}

    try:
        if args.check:
            config = load_run_config(args.config)
            config.update(overrides)
            validate_run_config(config)
            print(f"Configuration is valid: {args.config}")
        else:
            run_from_config(args.config, overrides=overrides)

    except KeyboardInterrupt:
        print("\nOperation cancelled by user.")
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
