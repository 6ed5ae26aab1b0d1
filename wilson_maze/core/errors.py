class MazeError(Exception):
    """Base class for maze generation failures."""


class GenerationCancelled(MazeError):
    """Raised at a suspension point when the run's cancel token fires.

    Not a failure: hosts stop the run and start over with a fresh graph.
    """


class WalkStuckError(MazeError):
    """A walking cell had no uncarved neighbor. Adjacency or carve bookkeeping is broken."""

    def __init__(self, x: int, y: int):
        super().__init__(f"Random walk stuck at ({x}, {y}): no uncarved neighbors")
        self.x = x
        self.y = y


class DuplicateEdgeError(MazeError):
    """An edge was carved twice."""

    def __init__(self, a, b):
        super().__init__(f"Edge {a} <-> {b} is already carved")
        self.a = a
        self.b = b
