from typing import Iterator, List, Optional, Tuple

from wilson_maze.core.errors import DuplicateEdgeError


class Cell:
    """
    One grid position. Relations are stored as indices into GridGraph.cells,
    never as references to other Cell objects.
    """
    __slots__ = ('index', 'x', 'y', 'neighbors', 'edges')

    def __init__(self, index: int, x: int, y: int):
        self.index = index
        self.x = x
        self.y = y
        self.neighbors: Tuple[int, ...] = ()
        self.edges: List[int] = []

    def __repr__(self):
        return f"Cell({self.x}, {self.y})"


class GridGraph:
    """
    Rectangular grid of cells with fixed adjacency and a mutable carved-edge relation.

    Adjacency order per cell is left, right, up, down. On a torus every cell
    gets all four entries (wrapping with modular arithmetic), so on 1- or
    2-wide tori the same index can appear twice or point back at the cell.
    """
    __slots__ = ('width', 'height', 'toroidal', 'cells', '_edge_count')

    def __init__(self, width: int, height: int, toroidal: bool = False):
        if isinstance(width, bool) or isinstance(height, bool) \
                or not isinstance(width, int) or not isinstance(height, int):
            raise ValueError(f"Grid dimensions must be integers, got {width!r}x{height!r}")
        if width < 1 or height < 1:
            raise ValueError(f"Grid dimensions must be at least 1x1, got {width}x{height}")

        self.width = width
        self.height = height
        self.toroidal = toroidal
        self._edge_count = 0
        self.cells: List[Cell] = [
            Cell(y * width + x, x, y) for y in range(height) for x in range(width)
        ]

        for cell in self.cells:
            cell.neighbors = tuple(self._compute_neighbors(cell.x, cell.y))

    def _compute_neighbors(self, x: int, y: int) -> Iterator[int]:
        w, h = self.width, self.height
        if self.toroidal:
            yield y * w + (x - 1) % w
            yield y * w + (x + 1) % w
            yield ((y - 1) % h) * w + x
            yield ((y + 1) % h) * w + x
            return

        if x > 0:
            yield y * w + x - 1
        if x < w - 1:
            yield y * w + x + 1
        if y > 0:
            yield (y - 1) * w + x
        if y < h - 1:
            yield (y + 1) * w + x

    def __len__(self):
        return len(self.cells)

    def index_of(self, x: int, y: int) -> int:
        if 0 <= x < self.width and 0 <= y < self.height:
            return y * self.width + x
        raise IndexError(f"Coordinate ({x}, {y}) out of bounds")

    def cell_at(self, x: int, y: int) -> Optional[Cell]:
        if 0 <= x < self.width and 0 <= y < self.height:
            return self.cells[y * self.width + x]
        return None

    def neighbors_of(self, index: int) -> Tuple[int, ...]:
        return self.cells[index].neighbors

    def uncarved_neighbors(self, index: int) -> List[int]:
        """
        Distinct neighbors of `index` not yet joined to it by a carved edge, in adjacency order.
        Reads the global carved state, so a walk never gets re-offered a tree edge.

        Repeats and the cell itself (narrow tori) are dropped, so a uniform pick
        over the result is uniform over real passages.
        """
        cell = self.cells[index]
        options = []
        for n in cell.neighbors:
            if n != index and n not in cell.edges and n not in options:
                options.append(n)
        return options

    def is_carved(self, a: int, b: int) -> bool:
        return b in self.cells[a].edges

    def carve(self, a: int, b: int):
        """Open the passage between cells `a` and `b` in both directions."""
        cell_a = self.cells[a]
        cell_b = self.cells[b]
        if a == b or b not in cell_a.neighbors:
            raise ValueError(f"{cell_b!r} is not a neighbor of {cell_a!r}")
        if b in cell_a.edges:
            raise DuplicateEdgeError(cell_a, cell_b)

        cell_a.edges.append(b)
        cell_b.edges.append(a)
        self._edge_count += 1

    def edge_count(self) -> int:
        return self._edge_count

    def edges(self) -> Iterator[Tuple[int, int]]:
        """Yields every carved edge once, as (lower index, higher index)."""
        for cell in self.cells:
            for other in cell.edges:
                if cell.index < other:
                    yield (cell.index, other)

    def is_wrap_edge(self, a: int, b: int) -> bool:
        """True when the endpoints are only adjacent through the torus wrap."""
        cell_a = self.cells[a]
        cell_b = self.cells[b]
        return abs(cell_a.x - cell_b.x) > 1 or abs(cell_a.y - cell_b.y) > 1
