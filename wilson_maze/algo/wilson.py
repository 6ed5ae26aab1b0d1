import logging
from typing import Dict, Iterator, List, Optional
from wilson_maze.algo.base import Generator, Step
from wilson_maze.core.errors import WalkStuckError

logger = logging.getLogger(__name__)


class WilsonsAlgorithm(Generator):
    """
    Uniform spanning tree by loop-erased random walks.

    Each walk starts at a random cell outside the tree and wanders until it
    touches the tree, erasing any loop the moment it closes. Only the surviving
    path is carved, and only once the walk has finished, so the graph never
    holds half a walk.
    """

    def __init__(self, graph, seed: int = None, rng=None):
        super().__init__(graph, seed=seed, rng=rng)
        self.root: Optional[int] = None
        self.current: Optional[int] = None
        self.path: List[int] = []
        self.walks = 0

    def run(self) -> Iterator[Step]:
        rng = self.rng
        graph = self.graph
        n = len(graph)

        self.phase = self.WALKING
        visited = bytearray(n)
        self.root = rng.randrange(n)
        visited[self.root] = 1
        tree_size = 1

        # Swap-remove list + position map: O(1) uniform pick and removal
        unvisited = [i for i in range(n) if i != self.root]
        slot = {cell: i for i, cell in enumerate(unvisited)}

        while unvisited:
            self.phase = self.WALKING
            current = unvisited[rng.randrange(len(unvisited))]
            path = [current]
            where: Dict[int, int] = {current: 0}
            self.path = path
            self.walks += 1

            while not visited[current]:
                self.step_count += 1
                options = graph.uncarved_neighbors(current)
                if not options:
                    cell = graph.cells[current]
                    raise WalkStuckError(cell.x, cell.y)
                nxt = rng.choice(options)

                loop_at = where.get(nxt)
                if loop_at is not None:
                    # Erase the loop: keep path[0..loop_at]
                    for erased in path[loop_at + 1:]:
                        del where[erased]
                    del path[loop_at + 1:]
                else:
                    where[nxt] = len(path)
                    path.append(nxt)

                self.current = nxt
                yield Step(nxt, tuple(path), self.root if tree_size == 1 else None)
                current = nxt

            self.phase = self.COMMITTING
            # Last element is already in the tree
            for a, b in zip(path, path[1:]):
                graph.carve(a, b)
                visited[a] = 1
                tree_size += 1

                i = slot.pop(a)
                last = unvisited.pop()
                if last != a:
                    unvisited[i] = last
                    slot[last] = i

            logger.debug(f"Walk {self.walks} committed {len(path) - 1} edges, {len(unvisited)} cells left")

        self.phase = self.DONE
        self.current = None
        self.path = []
        logger.debug(f"Spanning tree complete after {self.step_count} steps")
