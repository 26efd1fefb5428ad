import sys
import os
import time

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_weaver.algo.registry import GENERATORS, create_generator
from maze_weaver.core.analysis import calculate_stats, is_spanning_tree
from maze_weaver.core.grid import Grid


def benchmark_size(rows: int, cols: int, seed: int = 42):
    print(f"\n--- Benchmarking {rows}x{cols} ({rows * cols:,} cells) ---")

    start_time = time.time()
    grid = Grid(rows, cols)
    print(f"Grid Init: {time.time() - start_time:.4f}s")

    for name in GENERATORS:
        grid.reset()
        algo = create_generator(name, grid, seed=seed)

        gen_start = time.time()
        algo.run_all()
        gen_time = time.time() - gen_start

        stats = calculate_stats(grid)
        ok = "ok" if is_spanning_tree(grid) else "BROKEN"
        rate = (rows * cols) / gen_time if gen_time > 0 else float("inf")
        print(f"{name:<15} {gen_time:>8.4f}s  {rate:>12,.0f} cells/sec  "
              f"steps={algo.step_count:<9} dead ends={stats['dead_end_percent']:.1f}%  [{ok}]")


def run_suite():
    sizes = [
        (20, 20),
        (60, 60),
        (120, 120),
        # Aldous-Broder's cover time grows fast past this point
    ]

    for rows, cols in sizes:
        benchmark_size(rows, cols)


if __name__ == "__main__":
    run_suite()
