"""
CLI interface for dna-evolve.
Runs the TargetFinder demo and inspects configuration.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from evolution import EvolutionEngine, EvolutionError, TargetFinder
from evolution.target_finder import DEMO_DNA
from monitoring import GenerationHistory

from . import __version__
from .config import get_config
from .logging_config import configure_logging, get_logger
from .reporting import format_generation


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="dna-evolve",
        description="Evolve DNA-encoded candidates with a genetic algorithm",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Run command
    run_parser = subparsers.add_parser(
        "run", help="Evolve TargetFinder cursors towards (500, 500)"
    )
    run_parser.add_argument(
        "--generations", "-g", type=int, default=500, help="Generations to evolve"
    )
    run_parser.add_argument(
        "--config", type=Path, default=None, help="Properties or JSON config file"
    )
    run_parser.add_argument(
        "--seed", type=int, default=None, help="Random seed for a reproducible run"
    )
    run_parser.add_argument(
        "--dna", default=DEMO_DNA, help="Seed DNA over the symbols a, d, w, s"
    )
    run_parser.add_argument(
        "--report-every",
        type=int,
        default=0,
        help="Print the population every N generations (0 prints only the last)",
    )
    run_parser.add_argument(
        "--quiet", "-q", action="store_true", help="Only print the summary"
    )
    run_parser.add_argument(
        "--json-logs", action="store_true", help="Emit logs as JSON lines"
    )
    run_parser.add_argument(
        "--log-level", default=None, help="Log level override (DEBUG, INFO, WARNING, ERROR)"
    )

    # Config command
    config_parser = subparsers.add_parser("config", help="Show or write configuration")
    config_parser.add_argument(
        "--config", type=Path, default=None, help="Properties or JSON config file"
    )
    config_parser.add_argument(
        "--show", action="store_true", help="Show effective configuration"
    )
    config_parser.add_argument(
        "--write", type=Path, default=None, help="Write effective configuration as JSON"
    )

    return parser


def cmd_run(args: argparse.Namespace) -> int:
    """Evolve the TargetFinder demo population."""
    config = get_config(args.config)
    if args.seed is not None:
        config.evolution.seed = args.seed

    try:
        configure_logging(
            level=args.log_level or config.logging.level,
            json_output=args.json_logs or config.logging.json_output,
            log_file=Path(config.logging.log_file)
            if config.logging.log_file
            else None,
            use_colors=config.logging.use_colors,
        )
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    log = get_logger("dna_evolve.cli")

    if args.generations < 0:
        print(f"Error: --generations must be >= 0, got {args.generations}")
        return 1

    try:
        engine = EvolutionEngine.from_config(TargetFinder, args.dna, config.evolution)
    except EvolutionError as e:
        print(f"Error: {e}")
        return 1

    history = GenerationHistory()
    history.attach(engine)
    log.evolution_started(TargetFinder.__name__, engine.population_size)

    if args.report_every > 0 and not args.quiet:

        def print_generation(data: Dict[str, Any]) -> None:
            if data["generation"] % args.report_every == 0:
                print(format_generation(data["population"], data["generation"]))

        engine.add_event_listener("generation_completed", print_generation)

    try:
        result = engine.evolve(args.generations)
    except EvolutionError as e:
        print(f"Error: {e}")
        return 1

    log.evolution_complete(
        result.generation_count,
        result.best_fitness,
        int(result.duration_seconds * 1000),
    )

    if not args.quiet and (
        args.report_every <= 0 or result.generation_count % args.report_every
    ):
        print(format_generation(engine.current_generation, engine.generation_count))

    summary = history.summary()
    print("Evolution Summary")
    print("-" * 40)
    print(f"Generations: {result.generation_count}")
    print(f"Population size: {engine.population_size}")
    print(f"Initial best fitness: {summary['initial_best']}")
    print(f"Final best fitness: {summary['final_best']}")
    print(f"Final mean fitness: {summary['final_mean']:.2f}")
    print(f"Best position: {engine.best.position}")

    return 0


def cmd_config(args: argparse.Namespace) -> int:
    """Show or write the effective configuration."""
    config = get_config(args.config)

    if args.write:
        config.save(args.write)
        print(f"Wrote configuration to {args.write}")

    if args.show or not args.write:
        print("Current Configuration")
        print("-" * 40)
        print(f"source: {config.source or 'defaults'}")
        print(json.dumps(config.to_dict(), indent=2))

    return 0


def main(argv: Optional[list] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "run": cmd_run,
        "config": cmd_config,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
