"""
Maps maze state onto drawing primitives.

The projector never touches a real surface: it returns a list of FillRect /
Line / Circle records in paint order, which the pygame Renderer (or a test)
consumes. Cell size is derived from the surface width.
"""
from typing import Iterable, List, NamedTuple, Optional, Tuple, Union
from wilson_maze.core.graph import Cell, GridGraph

Color = Tuple[int, int, int]
Point = Tuple[float, float]

COLOR_BG = (0, 0, 0)
COLOR_PASSAGE = (255, 255, 255)
COLOR_WALK = (136, 136, 136)  # #888
COLOR_HEAD = (178, 34, 34)    # firebrick


class FillRect(NamedTuple):
    x: float
    y: float
    w: float
    h: float
    color: Color


class Line(NamedTuple):
    start: Point
    end: Point
    width: float
    color: Color


class Circle(NamedTuple):
    center: Point
    radius: float
    color: Color


Primitive = Union[FillRect, Line, Circle]


def cell_center(cell: Cell, cell_size: float) -> Point:
    return (cell_size * (cell.x + 0.5), cell_size * (cell.y + 0.5))


def _passages(graph: GridGraph, cell: Cell, cell_size: float) -> Iterable[Line]:
    stroke = cell_size / 1.5
    cx, cy = cell_center(cell, cell_size)

    for other_idx in cell.edges:
        other = graph.cells[other_idx]
        if graph.toroidal and graph.is_wrap_edge(cell.index, other_idx):
            # Each end draws its own stub toward the side it leaves through
            if abs(other.x - cell.x) > 1:
                edge_x = cell_size * graph.width if cell.x > other.x else 0.0
                yield Line((cx, cy), (edge_x, cy), stroke, COLOR_PASSAGE)
            else:
                edge_y = cell_size * graph.height if cell.y > other.y else 0.0
                yield Line((cx, cy), (cx, edge_y), stroke, COLOR_PASSAGE)
        else:
            yield Line((cx, cy), cell_center(other, cell_size), stroke, COLOR_PASSAGE)


def project(graph: GridGraph, current: Optional[int], path: Iterable[int],
            surface_size: Tuple[int, int], root: Optional[int] = None) -> List[Primitive]:
    """
    Builds the frame for one moment of generation.

    current: the walk's live head, marked with a disc (None when idle).
    path: cells of the in-progress walk, filled grey.
    root: the lone tree cell before the first commit, filled white since
          it has no passages to show yet.
    """
    surface_w, surface_h = surface_size
    cell_size = surface_w / graph.width
    in_walk = set(path)

    ops: List[Primitive] = [FillRect(0, 0, surface_w, surface_h, COLOR_BG)]

    for cell in graph.cells:
        if cell.index in in_walk:
            ops.append(FillRect(cell.x * cell_size, cell.y * cell_size, cell_size, cell_size, COLOR_WALK))
        ops.extend(_passages(graph, cell, cell_size))
        if cell.index == current:
            ops.append(Circle(cell_center(cell, cell_size), cell_size / 4, COLOR_HEAD))

    if root is not None:
        cell = graph.cells[root]
        ops.append(FillRect(cell.x * cell_size, cell.y * cell_size, cell_size, cell_size, COLOR_PASSAGE))

    return ops
