import logging
import os
import pygame
import cv2
import numpy as np
from datetime import datetime
from wilson_maze.core.graph import GridGraph

logger = logging.getLogger(__name__)


def surface_to_frame(surface: pygame.Surface) -> np.ndarray:
    """pygame surface -> (height, width, 3) BGR array for OpenCV."""
    # array3d is (width, height, 3) RGB
    view = pygame.surfarray.array3d(surface)
    frame = np.ascontiguousarray(np.transpose(view, (1, 0, 2)))
    return cv2.cvtColor(frame, cv2.COLOR_RGB2BGR)


def fps_for_delay(step_delay: float) -> int:
    """One video frame per walk step, clamped to 1..60 fps."""
    if step_delay <= 0:
        return 60
    return max(1, min(60, round(1.0 / step_delay)))


class VideoRecorder:
    """
    Writes one MP4 per generated maze, named after its size and topology.
    start() closes the previous maze's file and opens the next one.
    """
    def __init__(self, active=False, output_dir=None):
        self.active = active
        if output_dir is None:
            output_dir = "recordings" if os.path.isdir("recordings") else "."
        self.output_dir = output_dir
        self.output_file = None
        self.fps = 30
        self.writer = None
        self.frame_count = 0
        self.mazes_recorded = 0

    def start(self, graph: GridGraph, step_delay: float):
        if not self.active:
            return
        self.finish()

        self.mazes_recorded += 1
        self.fps = fps_for_delay(step_delay)
        topology = "torus" if graph.toroidal else "planar"
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        fname = f"wilson_{graph.width}x{graph.height}_{topology}_{ts}_{self.mazes_recorded:03d}.mp4"
        self.output_file = os.path.join(self.output_dir, fname)

    def capture_frame(self, surface: pygame.Surface):
        if not self.active or self.output_file is None:
            return

        if self.writer is None:
            fourcc = cv2.VideoWriter_fourcc(*'mp4v')
            self.writer = cv2.VideoWriter(self.output_file, fourcc, self.fps, surface.get_size())
            logger.info(f"Recording started: {self.output_file} at {self.fps} fps")

        self.writer.write(surface_to_frame(surface))
        self.frame_count += 1

    def finish(self):
        if self.writer:
            self.writer.release()
            logger.info(f"Video saved: {self.output_file} ({self.frame_count} frames)")
            self.writer = None
        self.output_file = None
        self.frame_count = 0
