import logging
import time
import pygame
from typing import Iterable
from wilson_maze.algo.base import Step
from wilson_maze.algo.scheduler import CancelToken, run_until_cancelled
from wilson_maze.core.graph import GridGraph
from wilson_maze.viz.projector import Circle, FillRect, Line, Primitive, project
from wilson_maze.viz.recorder import VideoRecorder

logger = logging.getLogger(__name__)


def paint(surface: pygame.Surface, ops: Iterable[Primitive]):
    """Draws projector primitives onto a pygame surface."""
    for op in ops:
        if isinstance(op, FillRect):
            pygame.draw.rect(surface, op.color, pygame.Rect(round(op.x), round(op.y), round(op.w), round(op.h)))
        elif isinstance(op, Line):
            width = max(1, round(op.width))
            pygame.draw.line(surface, op.color, op.start, op.end, width)
            # Round caps
            if width > 2:
                pygame.draw.circle(surface, op.color, op.start, width / 2)
                pygame.draw.circle(surface, op.color, op.end, width / 2)
        elif isinstance(op, Circle):
            pygame.draw.circle(surface, op.color, op.center, op.radius)


class PumpingCancelToken(CancelToken):
    """Keeps the window responsive while a run is suspended between steps."""
    POLL_MS = 16

    def __init__(self, renderer: "Renderer"):
        super().__init__()
        self.renderer = renderer

    def wait(self, timeout: float) -> bool:
        deadline = time.monotonic() + timeout
        while True:
            self.renderer.handle_input()
            if self.cancelled:
                return True
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            pygame.time.wait(max(1, int(min(remaining * 1000, self.POLL_MS))))


class Renderer:
    """
    Looping demo window: generates maze after maze and animates every walk step.

    Keys: Up/Down grid size, Left/Right step delay, T torus on/off, Esc quit.
    Changing a parameter cancels the current run and restarts on a fresh graph.
    """
    MIN_SIZE = 1
    MAX_SIZE = 64
    DELAY_STEP = 0.02
    MAX_DELAY = 2.0
    COLOR_HUD = (255, 215, 0)

    def __init__(self, size: int = 7, step_delay: float = 0.1, toroidal: bool = True,
                 width: int = 400, height: int = 400, hold: float = 5.0, record: bool = False,
                 seed: int = None, show_hud: bool = False, record_dir: str = None):
        self.size = size
        self.step_delay = step_delay
        self.toroidal = toroidal
        self.screen_width = width
        self.screen_height = height
        self.hold = hold
        self.seed = seed
        self.show_hud = show_hud

        self.recorder = VideoRecorder(active=record, output_dir=record_dir)

        self.running = True
        self.surface = None
        self.font = None
        self.token = None
        self.runs_completed = 0

    def init_window(self):
        pygame.init()
        pygame.display.set_caption("Wilson's Algorithm")
        self.surface = pygame.display.set_mode((self.screen_width, self.screen_height))
        self.font = pygame.font.SysFont("Consolas", 14)

    def make_graph(self) -> GridGraph:
        graph = GridGraph(self.size, self.size, toroidal=self.toroidal)
        # New maze, new file, paced by the current delay
        self.recorder.start(graph, self.step_delay)
        return graph

    def restart(self):
        if self.token:
            self.token.cancel()

    def handle_input(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
                self.restart()
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                    self.restart()
                elif event.key == pygame.K_UP and self.size < self.MAX_SIZE:
                    self.size += 1
                    self.restart()
                elif event.key == pygame.K_DOWN and self.size > self.MIN_SIZE:
                    self.size -= 1
                    self.restart()
                elif event.key == pygame.K_RIGHT:
                    self.step_delay = min(self.MAX_DELAY, self.step_delay + self.DELAY_STEP)
                    self.restart()
                elif event.key == pygame.K_LEFT:
                    self.step_delay = max(0.0, self.step_delay - self.DELAY_STEP)
                    self.restart()
                elif event.key == pygame.K_t:
                    self.toroidal = not self.toroidal
                    self.restart()

    def draw_hud(self, step: Step):
        info = [
            f"Size: {self.size}x{self.size} {'torus' if self.toroidal else 'planar'}",
            f"Delay: {self.step_delay * 1000:.0f} ms",
            f"Walk: {len(step.path)}",
            "REC" if self.recorder.active else "",
        ]
        for i, text in enumerate(info):
            lbl = self.font.render(text, True, self.COLOR_HUD)
            self.surface.blit(lbl, (6, 6 + i * 16))

    def draw_frame(self, graph: GridGraph, step: Step):
        ops = project(graph, step.current, step.path, self.surface.get_size(), root=step.root)
        paint(self.surface, ops)
        if self.show_hud:
            self.draw_hud(step)
        pygame.display.flip()

        if self.recorder.active:
            self.recorder.capture_frame(self.surface)

    def run_loop(self):
        while self.running:
            self.token = PumpingCancelToken(self)
            logger.info(f"Starting {self.size}x{self.size} {'torus' if self.toroidal else 'planar'} "
                        f"maze, delay {self.step_delay * 1000:.0f} ms")
            self.runs_completed += run_until_cancelled(
                self.make_graph, self.token, observer=self.draw_frame,
                step_delay=self.step_delay, hold=self.hold, seed=self.seed)

        self.recorder.finish()
        pygame.quit()
