import argparse
import logging
import sys
import os
import time

# Ensure project root is in path so we can import 'maze_weaver' package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_weaver.algo.registry import GENERATORS
from maze_weaver.core.errors import ConfigurationError


def setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Maze Weaver: perfect maze generator")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Generate Command
    gen_parser = subparsers.add_parser("generate", help="Generate a new maze")
    gen_parser.add_argument("--rows", type=int, default=20, help="Maze rows")
    gen_parser.add_argument("--cols", type=int, default=20, help="Maze columns")
    gen_parser.add_argument("--algo", type=str, default="dfs", choices=list(GENERATORS), help="Generation Algorithm")
    gen_parser.add_argument("--seed", type=int, default=None, help="Random Seed")
    gen_parser.add_argument("--start-row", type=int, default=None, help="Start row (dfs, aldous-broder, wilson)")
    gen_parser.add_argument("--start-col", type=int, default=None, help="Start column (dfs, aldous-broder, wilson)")
    gen_parser.add_argument("--delay", type=float, default=0.0, help="Delay between steps in ms (0 = no pause)")
    gen_parser.add_argument("--merge-probability", type=float, default=0.5, help="Eller: horizontal merge chance")
    gen_parser.add_argument("--down-probability", type=float, default=0.25, help="Eller: extra downward link chance")
    gen_parser.add_argument("--visual", action="store_true", help="Animate generation in a window")
    gen_parser.add_argument("--ascii", action="store_true", help="Print the finished maze")

    # Benchmark Command
    bench_parser = subparsers.add_parser("benchmark", help="Time every generator")
    bench_parser.add_argument("--size", type=int, default=60, help="Benchmark grid side")
    bench_parser.add_argument("--seed", type=int, default=123, help="Random Seed")

    return parser


def run_generate(args, logger: logging.Logger) -> int:
    from maze_weaver.config import GenerationConfig
    from maze_weaver.core.analysis import calculate_stats, is_spanning_tree
    from maze_weaver.core.events import LoggingSink, log_status
    from maze_weaver.core.grid import Grid
    from maze_weaver.driver import MazeDriver

    config = GenerationConfig.from_args(args)
    logger.info(f"Generating {config.rows}x{config.cols} maze with {config.algo.upper()}...")

    sink = LoggingSink(logging.getLogger("maze_weaver.progress"))

    if args.visual:
        from maze_weaver.viz.renderer import Renderer
        # The renderer paces the steps itself so the window stays responsive
        driver = MazeDriver(Grid(config.rows, config.cols), sink=sink)
        logger.info("Visual mode enabled - Opening window...")
        renderer = Renderer(driver.grid, steps=driver.steps_for(config), delay_ms=config.delay_ms)
        renderer.init_window()
        renderer.run_loop()
        event = renderer.last_event
    else:
        driver = MazeDriver.from_config(config, sink=sink)
        run = driver.steps_for(config)
        for _ in run:
            pass
        event = run.last_event

    grid = driver.grid
    if event is None or not event.done:
        logger.warning("Generation did not finish.")
        return 1

    log_status(*event.messages())
    logger.info(f"Spanning tree: {is_spanning_tree(grid)}")
    logger.info(f"Stats: {calculate_stats(grid)}")

    if args.ascii:
        from maze_weaver.viz.ascii import render_ascii
        print(render_ascii(grid))
    return 0


def run_benchmark(args, logger: logging.Logger) -> int:
    from maze_weaver.algo.registry import create_generator
    from maze_weaver.core.analysis import calculate_stats
    from maze_weaver.core.grid import Grid

    logger.info(f"Running Generator Benchmark Suite (Size: {args.size}x{args.size})...")

    print(f"\n{'ALGORITHM':<15} | {'TIME (s)':<10} | {'STEPS':<10} | {'DEAD ENDS %':<10}")
    print("-" * 55)

    grid = Grid(args.size, args.size)
    for name in GENERATORS:
        grid.reset()
        generator = create_generator(name, grid, seed=args.seed)
        t_start = time.time()
        generator.run_all()
        duration = time.time() - t_start
        stats = calculate_stats(grid)
        print(f"{name:<15} | {duration:<10.4f} | {generator.step_count:<10} | {stats['dead_end_percent']:<10.2f}")
    return 0


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger("maze_weaver")

    if args.command is None:
        parser.print_help()
        return 0

    logger.info(f"Running command: {args.command}")
    try:
        if args.command == "generate":
            return run_generate(args, logger)
        if args.command == "benchmark":
            return run_benchmark(args, logger)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
