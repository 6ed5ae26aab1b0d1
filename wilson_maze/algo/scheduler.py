import logging
import random
import threading
from typing import Callable, Optional
from wilson_maze.algo.base import Generator, Step
from wilson_maze.algo.wilson import WilsonsAlgorithm
from wilson_maze.core.errors import GenerationCancelled
from wilson_maze.core.graph import GridGraph

logger = logging.getLogger(__name__)

# observer(graph, step) -> None. Must not mutate the graph.
Observer = Callable[[GridGraph, Step], None]


class CancelToken:
    """
    Cooperative cancellation signal. Only checked while a run is suspended.
    Hosts with their own event loop override wait() to keep pumping it.
    """
    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float) -> bool:
        """Suspends for `timeout` seconds. Returns True if cancelled meanwhile."""
        if timeout <= 0:
            return self._event.is_set()
        return self._event.wait(timeout)


class StepScheduler:
    """
    Drives a Generator one elementary step at a time:
    step -> observer -> suspend(step_delay) -> next step.

    With animate=False the steps run back to back, with no observer calls and
    no suspension. The final frame and the hold after completion happen either way.
    """
    def __init__(self, step_delay: float = 0.1, cancel_token: CancelToken = None,
                 observer: Optional[Observer] = None, animate: bool = True, hold: float = 0.0):
        if step_delay < 0:
            raise ValueError(f"step_delay must be non-negative, got {step_delay}")
        if hold < 0:
            raise ValueError(f"hold must be non-negative, got {hold}")
        self.step_delay = step_delay
        self.cancel_token = cancel_token if cancel_token is not None else CancelToken()
        self.observer = observer
        self.animate = animate
        self.hold = hold

    def _suspend(self, generator: Generator, timeout: float):
        if self.cancel_token.wait(timeout):
            generator.cancel()
            logger.debug(f"Run cancelled after {generator.step_count} steps")
            raise GenerationCancelled(f"Generation cancelled after {generator.step_count} steps")

    def run(self, generator: Generator) -> int:
        """Runs `generator` to completion. Returns its step count or raises GenerationCancelled."""
        graph = generator.graph
        steps = generator.run()
        try:
            for step in steps:
                if not self.animate:
                    continue
                if self.observer:
                    self.observer(graph, step)
                self._suspend(generator, self.step_delay)
        finally:
            # Abandoned runs never resume
            steps.close()

        if self.observer:
            self.observer(graph, Step(None, ()))
        self._suspend(generator, self.hold)
        return generator.step_count


def wilsons_algorithm(graph: GridGraph, observer: Optional[Observer] = None,
                      cancel_token: CancelToken = None, step_delay: float = 0.1,
                      animate: bool = True, hold: float = 0.0,
                      seed: int = None, rng: random.Random = None) -> int:
    """
    Builds a uniform spanning tree over `graph`, rendering through `observer`
    after each step. Returns the number of elementary random-walk steps.

    Raises GenerationCancelled if `cancel_token` fires while suspended.
    """
    generator = WilsonsAlgorithm(graph, seed=seed, rng=rng)
    scheduler = StepScheduler(step_delay, cancel_token, observer, animate=animate, hold=hold)
    return scheduler.run(generator)


def run_until_cancelled(make_graph: Callable[[], GridGraph], cancel_token: CancelToken,
                        observer: Optional[Observer] = None, step_delay: float = 0.1,
                        hold: float = 5.0, seed: int = None, max_runs: int = None) -> int:
    """
    Looping demo: generates maze after maze, each on a fresh graph, until the
    token fires. Cancellation ends the loop quietly; any other error propagates.
    Returns the number of completed runs.
    """
    rng = random.Random(seed)
    completed = 0
    while not cancel_token.cancelled:
        if max_runs is not None and completed >= max_runs:
            break
        graph = make_graph()
        try:
            steps = wilsons_algorithm(graph, observer, cancel_token, step_delay, hold=hold, rng=rng)
        except GenerationCancelled:
            logger.info("Generation cancelled, stopping")
            break
        completed += 1
        logger.info(f"Maze {completed} ({graph.width}x{graph.height}) spanned in {steps} steps")
    return completed
