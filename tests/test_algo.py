import unittest
import random
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_weaver.algo.aldous_broder import AldousBroderGenerator
from maze_weaver.algo.dfs import RecursiveBacktracker
from maze_weaver.algo.eller import EllerGenerator
from maze_weaver.algo.kruskal import KruskalGenerator, build_edges
from maze_weaver.algo.registry import GENERATORS, create_generator
from maze_weaver.algo.wilson import WilsonGenerator
from maze_weaver.core.analysis import connected_components, is_spanning_tree
from maze_weaver.core.errors import ConfigurationError
from maze_weaver.core.grid import Grid


def finish(steps):
    """Drains a step generator and returns its return value."""
    try:
        while True:
            next(steps)
    except StopIteration as stop:
        return stop.value


class ScriptedRandom(random.Random):
    """choice() follows a fixed list of (row, col) targets."""

    def __init__(self, targets):
        super().__init__(0)
        self.targets = list(targets)

    def choice(self, seq):
        row, col = self.targets.pop(0)
        for cell in seq:
            if (cell.row, cell.col) == (row, col):
                return cell
        raise AssertionError(f"({row}, {col}) not among candidates {seq}")


SIZES = [(1, 1), (1, 7), (7, 1), (2, 2), (5, 8), (12, 9)]


class TestSpanningTree(unittest.TestCase):
    def test_all_generators_build_spanning_trees(self):
        for name in GENERATORS:
            for rows, cols in SIZES:
                for seed in (1, 2, 3):
                    with self.subTest(algo=name, rows=rows, cols=cols, seed=seed):
                        grid = Grid(rows, cols)
                        gen = create_generator(name, grid, seed=seed)
                        event = gen.run_all()

                        self.assertTrue(is_spanning_tree(grid))
                        self.assertEqual(grid.passage_count(), rows * cols - 1)
                        self.assertEqual(gen.walls_removed, rows * cols - 1)
                        self.assertEqual(grid.visited_count(), rows * cols)
                        self.assertTrue(event.done)
                        self.assertEqual(event.visited_count, rows * cols)

    def test_one_component_less_per_wall(self):
        for name in GENERATORS:
            with self.subTest(algo=name):
                grid = Grid(6, 6)
                gen = create_generator(name, grid, seed=11)
                for _ in gen.run():
                    # A forest has exactly V - E components; a cycle would break it
                    self.assertEqual(connected_components(grid), grid.size - grid.passage_count())

    def test_single_cell(self):
        for name in GENERATORS:
            with self.subTest(algo=name):
                grid = Grid(1, 1)
                gen = create_generator(name, grid, seed=5)
                event = gen.run_all()
                self.assertEqual(gen.walls_removed, 0)
                self.assertEqual(grid.visited_count(), 1)
                self.assertEqual(grid.get_cell(0, 0).walls, Grid.ALL_WALLS)
                self.assertTrue(event.done)

    def test_reset_and_regenerate(self):
        grid = Grid(7, 5)
        for name in GENERATORS:
            with self.subTest(algo=name):
                grid.reset()
                create_generator(name, grid, seed=9).run_all()
                self.assertTrue(is_spanning_tree(grid))

    def test_visited_count_monotonic(self):
        for name in GENERATORS:
            with self.subTest(algo=name):
                gen = create_generator(name, Grid(8, 8), seed=4)
                counts = [event.visited_count for event in gen.run()]
                self.assertEqual(counts, sorted(counts))
                self.assertEqual(counts[-1], 64)

    def test_determinism(self):
        for name in GENERATORS:
            with self.subTest(algo=name):
                grid1 = Grid(10, 10)
                create_generator(name, grid1, seed=12345).run_all()
                grid2 = Grid(10, 10)
                gen = create_generator(name, grid2, seed=12345)
                for _ in gen.run():
                    pass
                self.assertEqual(grid1.to_wall_array().tobytes(), grid2.to_wall_array().tobytes())

    def test_unknown_algorithm(self):
        with self.assertRaises(ConfigurationError):
            create_generator("prim", Grid(3, 3))

    def test_start_out_of_range(self):
        with self.assertRaises(ConfigurationError):
            RecursiveBacktracker(Grid(3, 3), start=(3, 0))


class TestRecursiveBacktracker(unittest.TestCase):
    def test_every_cell_backtracked_once(self):
        grid = Grid(6, 7)
        gen = RecursiveBacktracker(grid, seed=42)
        gen.run_all()
        self.assertEqual(gen.dead_ends, grid.size)
        # size - 1 carves plus size pops
        self.assertEqual(gen.step_count, 2 * grid.size - 1)

    def test_custom_start(self):
        grid = Grid(4, 4)
        gen = RecursiveBacktracker(grid, seed=1, start=(3, 2))
        steps = gen.run()
        next(steps)
        carved = [c for c in grid.iter_cells() if c.walls != Grid.ALL_WALLS]
        self.assertIn(grid.get_cell(3, 2), carved)


class TestKruskal(unittest.TestCase):
    def test_edge_count(self):
        grid = Grid(4, 6)
        self.assertEqual(len(build_edges(grid)), 2 * 4 * 6 - 4 - 6)

    def test_two_by_two(self):
        grid = Grid(2, 2)
        gen = KruskalGenerator(grid, seed=2024)
        gen.run_all()
        self.assertEqual(gen.accepted, 3)
        self.assertEqual(gen.discarded, 1)
        self.assertTrue(is_spanning_tree(grid))

        again = Grid(2, 2)
        KruskalGenerator(again, seed=2024).run_all()
        self.assertEqual(grid.to_wall_array().tobytes(), again.to_wall_array().tobytes())

    def test_sets_fully_merged(self):
        grid = Grid(5, 5)
        gen = KruskalGenerator(grid, seed=3)
        gen.run_all()
        self.assertEqual(gen.sets.components, 1)
        self.assertEqual(gen.accepted + gen.discarded, len(build_edges(grid)))


class TestAldousBroder(unittest.TestCase):
    def test_walk_revisits(self):
        grid = Grid(6, 6)
        gen = AldousBroderGenerator(grid, seed=8)
        gen.run_all()
        self.assertGreaterEqual(gen.moves, grid.size - 1)
        self.assertEqual(gen.step_count, gen.moves)

    def test_fixed_start(self):
        grid = Grid(3, 3)
        gen = AldousBroderGenerator(grid, seed=8, start=(1, 1))
        self.assertIs(gen.start_cell(), grid.get_cell(1, 1))

    def test_trees_are_uniform(self):
        # A 2x3 grid has exactly 15 spanning trees
        counts = {}
        for seed in range(6000):
            grid = Grid(2, 3)
            AldousBroderGenerator(grid, seed=seed).run_all()
            key = grid.to_wall_array().tobytes()
            counts[key] = counts.get(key, 0) + 1

        self.assertEqual(len(counts), 15)
        # 400 expected each; the bounds sit about five standard deviations out
        for count in counts.values():
            self.assertGreater(count, 300)
            self.assertLess(count, 500)


class TestWilson(unittest.TestCase):
    def test_loop_back_to_start_is_erased(self):
        # A=(0,1) -> B=(0,0) -> A -> C=(0,2); C is the tree root
        grid = Grid(1, 3)
        grid.get_cell(0, 2).visited = True
        rng = ScriptedRandom([(0, 0), (0, 1), (0, 2)])
        gen = WilsonGenerator(grid, rng=rng)

        path = gen.loop_erased_walk(grid.get_cell(0, 1))
        self.assertEqual([(c.row, c.col) for c in path], [(0, 1), (0, 2)])
        self.assertNotIn(grid.get_cell(0, 0), path)
        self.assertEqual(rng.targets, [])

    def test_four_cell_loop_is_erased(self):
        grid = Grid(3, 3)
        grid.get_cell(0, 1).visited = True
        rng = ScriptedRandom([(1, 2), (2, 2), (2, 1), (1, 1), (0, 1)])
        gen = WilsonGenerator(grid, rng=rng)

        path = gen.loop_erased_walk(grid.get_cell(1, 1))
        self.assertEqual([(c.row, c.col) for c in path], [(1, 1), (0, 1)])

    def test_walk_never_steps_straight_back(self):
        grid = Grid(3, 3)
        grid.get_cell(2, 2).visited = True
        gen = WilsonGenerator(grid, seed=21)
        path = gen.loop_erased_walk(grid.get_cell(0, 0))
        # Loop-erased: simple path ending in the tree
        self.assertEqual(len(path), len(set(path)))
        self.assertIs(path[-1], grid.get_cell(2, 2))
        for a, b in zip(path, path[1:]):
            grid.direction_between(a, b)

    def test_walk_starts_drawn_from_unvisited_list(self):
        class NoScanGrid(Grid):
            def get_random_unvisited_cell(self, rng=None):
                raise AssertionError("walk start should not rescan the grid")

        grid = NoScanGrid(9, 7)
        gen = WilsonGenerator(grid, seed=13)
        gen.run_all()
        self.assertEqual(gen.unvisited, [])
        self.assertTrue(is_spanning_tree(grid))

    def test_every_tree_reachable(self):
        seen = set()
        for seed in range(3000):
            grid = Grid(2, 3)
            WilsonGenerator(grid, seed=seed).run_all()
            seen.add(grid.to_wall_array().tobytes())
        self.assertEqual(len(seen), 15)

    def test_grid_untouched_by_walk(self):
        grid = Grid(4, 4)
        grid.get_cell(0, 0).visited = True
        gen = WilsonGenerator(grid, seed=2)
        gen.loop_erased_walk(grid.get_cell(3, 3))
        self.assertEqual(grid.passage_count(), 0)
        self.assertEqual(grid.visited_count(), 1)


class TestEller(unittest.TestCase):
    def test_row_sets_carried_forward(self):
        grid = Grid(3, 4)
        gen = EllerGenerator(grid, seed=17)
        gen.enter_row(0)
        row0 = finish(gen.merge_row(0, gen.initial_sets(), gen.merge_probability))
        row1 = finish(gen.descend(0, row0))

        self.assertEqual(len(row1), 4)
        self.assertTrue(set(row0) <= set(row1))
        # Carried columns are linked straight down
        for col, set_id in enumerate(row1):
            linked = not grid.get_cell(0, col).has_wall(Grid.BOTTOM)
            self.assertEqual(linked, set_id in row0 and row0[col] == set_id)

    def test_fresh_sets_are_new(self):
        grid = Grid(2, 6)
        gen = EllerGenerator(grid, seed=3, down_probability=0.0)
        row0 = finish(gen.merge_row(0, gen.initial_sets(), 1.0))
        self.assertEqual(len(set(row0)), 1)
        row1 = finish(gen.descend(0, row0))
        fresh = [s for s in row1 if s not in row0]
        self.assertEqual(len(fresh), 5)
        self.assertEqual(len(fresh), len(set(fresh)))
        self.assertTrue(all(s >= 6 for s in fresh))

    def test_always_merge_and_descend(self):
        grid = Grid(3, 5)
        gen = EllerGenerator(grid, seed=1, merge_probability=1.0, down_probability=1.0)
        gen.run_all()
        # First row fully joined, every column linked down
        for col in range(4):
            self.assertFalse(grid.get_cell(0, col).has_wall(Grid.RIGHT))
        for col in range(5):
            self.assertFalse(grid.get_cell(0, col).has_wall(Grid.BOTTOM))
        self.assertTrue(is_spanning_tree(grid))

    def test_never_merge_still_connected(self):
        grid = Grid(6, 6)
        EllerGenerator(grid, seed=4, merge_probability=0.0, down_probability=0.0).run_all()
        self.assertTrue(is_spanning_tree(grid))

    def test_probability_validation(self):
        with self.assertRaises(ConfigurationError):
            EllerGenerator(Grid(2, 2), merge_probability=1.5)
        with self.assertRaises(ConfigurationError):
            EllerGenerator(Grid(2, 2), down_probability=-0.1)

    def test_memory_is_one_row(self):
        grid = Grid(10, 7)
        gen = EllerGenerator(grid, seed=6)
        for _ in gen.run():
            self.assertEqual(len(gen.sets), 7)


if __name__ == '__main__':
    unittest.main()
