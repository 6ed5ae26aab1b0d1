from typing import Iterator, List
from wilson_maze.algo.base import Generator, Step

class RandomizedDFS(Generator):
    """
    Randomized depth-first carving. Produces a spanning tree, but not a uniform
    one: long corridors and few branches.
    """
    def run(self) -> Iterator[Step]:
        rng = self.rng
        graph = self.graph
        self.phase = self.WALKING

        start = rng.randrange(len(graph))
        in_tree = bytearray(len(graph))
        in_tree[start] = 1

        stack: List[int] = [start]

        while stack:
            current = stack[-1]

            # Neighbor lists can repeat on narrow tori
            candidates = sorted({n for n in graph.neighbors_of(current) if not in_tree[n]})

            if candidates:
                nxt = rng.choice(candidates)
                graph.carve(current, nxt)
                in_tree[nxt] = 1
                stack.append(nxt)
                self.step_count += 1
                yield Step(nxt, tuple(stack))
            else:
                # Backtrack
                stack.pop()

        self.phase = self.DONE
