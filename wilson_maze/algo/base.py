import random
from abc import ABC, abstractmethod
from typing import Iterator, NamedTuple, Optional, Tuple
from wilson_maze.core.graph import GridGraph


class Step(NamedTuple):
    """Read-only snapshot handed to observers after one elementary step."""
    current: Optional[int]
    path: Tuple[int, ...]
    root: Optional[int] = None


class Generator(ABC):
    # Lifecycle phases
    IDLE = "idle"
    WALKING = "walking"
    COMMITTING = "committing"
    DONE = "done"
    CANCELLED = "cancelled"

    def __init__(self, graph: GridGraph, seed: int = None, rng: random.Random = None):
        self.graph = graph
        self.seed = seed
        self.rng = rng if rng is not None else random.Random(seed)
        self.step_count = 0
        self.phase = self.IDLE

    @abstractmethod
    def run(self) -> Iterator[Step]:
        """
        Yields one Step per elementary move.
        Carving happens in-place on self.graph.
        """
        pass

    def cancel(self):
        if self.phase != self.DONE:
            self.phase = self.CANCELLED

    def run_all(self) -> int:
        """Helper to run the generator to completion. Returns the step count."""
        for _ in self.run():
            pass
        return self.step_count
