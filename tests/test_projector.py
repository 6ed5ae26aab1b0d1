import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from wilson_maze.core.graph import GridGraph
from wilson_maze.viz.projector import (
    COLOR_BG, COLOR_HEAD, COLOR_PASSAGE, COLOR_WALK, Circle, FillRect, Line, project
)

def lines(ops):
    return [op for op in ops if isinstance(op, Line)]

class TestProjector(unittest.TestCase):
    def test_background_first(self):
        graph = GridGraph(3, 3)
        ops = project(graph, None, [], (300, 300))
        self.assertEqual(ops, [FillRect(0, 0, 300, 300, COLOR_BG)])

    def test_passage_drawn_center_to_center(self):
        graph = GridGraph(2, 1)
        graph.carve(0, 1)
        ops = project(graph, None, [], (200, 100))

        drawn = lines(ops)
        # Each endpoint draws its own stroke
        self.assertEqual(len(drawn), 2)
        self.assertEqual(drawn[0].start, (50.0, 50.0))
        self.assertEqual(drawn[0].end, (150.0, 50.0))
        self.assertEqual(drawn[1].start, (150.0, 50.0))
        self.assertEqual(drawn[1].end, (50.0, 50.0))
        self.assertAlmostEqual(drawn[0].width, 100 / 1.5)
        self.assertEqual(drawn[0].color, COLOR_PASSAGE)

    def test_horizontal_wrap_draws_stubs(self):
        graph = GridGraph(4, 1, toroidal=True)
        graph.carve(0, 3)
        drawn = lines(project(graph, None, [], (400, 100)))

        self.assertEqual(len(drawn), 2)
        self.assertEqual((drawn[0].start, drawn[0].end), ((50.0, 50.0), (0.0, 50.0)))
        self.assertEqual((drawn[1].start, drawn[1].end), ((350.0, 50.0), (400.0, 50.0)))

    def test_vertical_wrap_draws_stubs(self):
        graph = GridGraph(3, 3, toroidal=True)
        top, bottom = graph.index_of(1, 0), graph.index_of(1, 2)
        graph.carve(top, bottom)
        drawn = lines(project(graph, None, [], (300, 300)))

        self.assertEqual((drawn[0].start, drawn[0].end), ((150.0, 50.0), (150.0, 0.0)))
        self.assertEqual((drawn[1].start, drawn[1].end), ((150.0, 250.0), (150.0, 300.0)))

    def test_adjacent_torus_edge_is_direct(self):
        graph = GridGraph(3, 3, toroidal=True)
        graph.carve(0, 1)
        drawn = lines(project(graph, None, [], (300, 300)))
        self.assertEqual(drawn[0].end, (150.0, 50.0))

    def test_walk_and_head(self):
        graph = GridGraph(3, 3)
        path = [0, 1, 4]
        ops = project(graph, 4, path, (300, 300))

        fills = [op for op in ops[1:] if isinstance(op, FillRect)]
        self.assertEqual(len(fills), 3)
        self.assertTrue(all(op.color == COLOR_WALK for op in fills))
        self.assertIn(FillRect(100.0, 100.0, 100.0, 100.0, COLOR_WALK), fills)

        heads = [op for op in ops if isinstance(op, Circle)]
        self.assertEqual(heads, [Circle((150.0, 150.0), 25.0, COLOR_HEAD)])

    def test_root_painted_last(self):
        graph = GridGraph(2, 2)
        ops = project(graph, 1, [0, 1], (200, 200), root=3)
        self.assertEqual(ops[-1], FillRect(100.0, 100.0, 100.0, 100.0, COLOR_PASSAGE))

    def test_projection_does_not_mutate(self):
        graph = GridGraph(4, 4, toroidal=True)
        graph.carve(0, 1)
        graph.carve(0, 3)
        before = [list(c.edges) for c in graph.cells]
        project(graph, 2, [2, 6], (400, 400))
        self.assertEqual([list(c.edges) for c in graph.cells], before)
        self.assertEqual(graph.edge_count(), 2)

if __name__ == '__main__':
    unittest.main()
