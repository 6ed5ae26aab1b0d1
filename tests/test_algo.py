import unittest
import itertools
import random
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from wilson_maze.algo.base import Generator
from wilson_maze.algo.dfs import RandomizedDFS
from wilson_maze.algo.wilson import WilsonsAlgorithm
from wilson_maze.core.complexity import MazeStats
from wilson_maze.core.errors import WalkStuckError
from wilson_maze.core.graph import GridGraph

class TestWilson(unittest.TestCase):
    def test_spanning_tree_sizes(self):
        for w, h in [(1, 1), (2, 1), (1, 5), (3, 3), (7, 7), (12, 5), (20, 20)]:
            for toroidal in (False, True):
                graph = GridGraph(w, h, toroidal=toroidal)
                WilsonsAlgorithm(graph, seed=w * 100 + h).run_all()

                self.assertEqual(graph.edge_count(), w * h - 1, f"{w}x{h} torus={toroidal}")
                self.assertTrue(MazeStats.is_spanning_tree(graph), f"{w}x{h} torus={toroidal}")

    def test_edges_subset_of_neighbors(self):
        graph = GridGraph(9, 6, toroidal=True)
        WilsonsAlgorithm(graph, seed=5).run_all()
        for cell in graph.cells:
            for other in cell.edges:
                self.assertIn(other, cell.neighbors)
                self.assertIn(cell.index, graph.cells[other].edges)

    def test_single_cell(self):
        graph = GridGraph(1, 1)
        algo = WilsonsAlgorithm(graph, seed=1)
        steps = list(algo.run())

        self.assertEqual(steps, [])
        self.assertEqual(algo.step_count, 0)
        self.assertEqual(graph.edge_count(), 0)
        self.assertEqual(algo.phase, Generator.DONE)

    def test_two_cells(self):
        for seed in range(20):
            graph = GridGraph(2, 1)
            algo = WilsonsAlgorithm(graph, seed=seed)
            algo.run_all()

            # The lone unvisited cell has one neighbor, which is the tree
            self.assertEqual(algo.step_count, 1)
            self.assertEqual(list(graph.edges()), [(0, 1)])

    def test_determinism(self):
        w, h = 10, 10
        graph1 = GridGraph(w, h)
        steps1 = WilsonsAlgorithm(graph1, seed=12345).run_all()

        graph2 = GridGraph(w, h)
        algo = WilsonsAlgorithm(graph2, rng=random.Random(12345))
        for _ in algo.run(): pass

        self.assertEqual(steps1, algo.step_count)
        self.assertEqual(sorted(graph1.edges()), sorted(graph2.edges()))

    def test_loop_erased_paths_are_simple(self):
        graph = GridGraph(8, 8)
        algo = WilsonsAlgorithm(graph, seed=7)
        saw_erasure = False
        previous = ()

        for step in algo.run():
            self.assertEqual(len(step.path), len(set(step.path)), "walk path repeats a cell")
            self.assertEqual(step.path[-1], step.current)
            if previous and len(step.path) <= len(previous) and step.path[0] == previous[0]:
                saw_erasure = True
            previous = step.path

        self.assertTrue(saw_erasure, "an 8x8 walk should close at least one loop")
        self.assertTrue(MazeStats.is_spanning_tree(graph))

    def test_step_count_matches_yields(self):
        graph = GridGraph(6, 6, toroidal=True)
        algo = WilsonsAlgorithm(graph, seed=3)
        yielded = sum(1 for _ in algo.run())
        self.assertEqual(yielded, algo.step_count)
        self.assertGreaterEqual(algo.step_count, 35)

    def test_no_carving_mid_walk(self):
        graph = GridGraph(6, 6)
        algo = WilsonsAlgorithm(graph, seed=11)
        for step in algo.run():
            # Path cells other than the head are never in the tree yet
            for idx in step.path[:-1]:
                self.assertEqual(graph.cells[idx].edges, [])

    def test_root_reported_until_first_commit(self):
        graph = GridGraph(5, 5)
        algo = WilsonsAlgorithm(graph, seed=2)
        for step in algo.run():
            if graph.edge_count() == 0:
                self.assertEqual(step.root, algo.root)
            else:
                self.assertIsNone(step.root)

    def test_stuck_walk_is_fatal(self):
        graph = GridGraph(3, 1)
        # Break the bookkeeping: every neighbor of the middle cell looks carved.
        # Root is cell 0; unvisited is then [1, 2] and the walk starts at 1.
        graph.cells[1].edges.extend([0, 2])
        algo = WilsonsAlgorithm(graph, rng=_FixedRng([0, 0]))
        with self.assertRaises(WalkStuckError):
            algo.run_all()

    def assert_uniform(self, w, h, toroidal, runs, seed):
        trees = all_spanning_trees(w, h, toroidal)
        rng = random.Random(seed)
        counts = {tree: 0 for tree in trees}

        for _ in range(runs):
            graph = GridGraph(w, h, toroidal=toroidal)
            WilsonsAlgorithm(graph, rng=rng).run_all()
            tree = frozenset(graph.edges())
            self.assertIn(tree, counts)
            counts[tree] += 1

        expected = runs / len(trees)
        self.assertTrue(all(counts.values()), "some spanning tree never appeared")
        for tree, n in counts.items():
            self.assertLess(abs(n - expected), 0.3 * expected, f"tree {sorted(tree)} drawn {n} times")

        # Chi-square, far-tail bound for len(trees) - 1 degrees of freedom
        chi2 = sum((n - expected) ** 2 / expected for n in counts.values())
        dof = len(trees) - 1
        self.assertLess(chi2, dof + 5 * (2 * dof) ** 0.5)

    def test_uniform_over_spanning_trees(self):
        # 3x2 grid has 15 spanning trees
        self.assertEqual(len(all_spanning_trees(3, 2, False)), 15)
        self.assert_uniform(3, 2, False, runs=20000, seed=2024)

    def test_uniform_on_narrow_torus(self):
        # 2x3 torus is a triangular prism (75 trees); left and right are the same cell
        self.assertEqual(len(all_spanning_trees(2, 3, True)), 75)
        self.assert_uniform(2, 3, True, runs=20000, seed=77)

def all_spanning_trees(w, h, toroidal):
    """Brute force: every (N-1)-subset of distinct passages that spans the grid."""
    base = GridGraph(w, h, toroidal=toroidal)
    passages = sorted({(min(c.index, n), max(c.index, n))
                       for c in base.cells for n in c.neighbors if n != c.index})
    trees = []
    for subset in itertools.combinations(passages, len(base) - 1):
        graph = GridGraph(w, h, toroidal=toroidal)
        for a, b in subset:
            graph.carve(a, b)
        if MazeStats.is_spanning_tree(graph):
            trees.append(frozenset(subset))
    return trees

class _FixedRng:
    """Scripted randrange results first, then a seeded Random."""
    def __init__(self, picks):
        self._picks = list(picks)
        self._rng = random.Random(0)

    def randrange(self, n):
        if self._picks:
            return self._picks.pop(0)
        return self._rng.randrange(n)

    def choice(self, seq):
        return self._rng.choice(seq)

class TestRandomizedDFS(unittest.TestCase):
    def test_spanning_tree(self):
        for toroidal in (False, True):
            graph = GridGraph(15, 9, toroidal=toroidal)
            algo = RandomizedDFS(graph, seed=42)
            algo.run_all()
            self.assertEqual(algo.step_count, 15 * 9 - 1)
            self.assertTrue(MazeStats.is_spanning_tree(graph))

    def test_narrow_torus(self):
        graph = GridGraph(2, 2, toroidal=True)
        RandomizedDFS(graph, seed=1).run_all()
        self.assertTrue(MazeStats.is_spanning_tree(graph))

    def test_determinism(self):
        graph1 = GridGraph(10, 10)
        RandomizedDFS(graph1, seed=99).run_all()
        graph2 = GridGraph(10, 10)
        RandomizedDFS(graph2, seed=99).run_all()
        self.assertEqual(sorted(graph1.edges()), sorted(graph2.edges()))

if __name__ == '__main__':
    unittest.main()
