from collections import deque
from wilson_maze.core.graph import GridGraph

class MazeStats:
    @staticmethod
    def is_spanning_tree(graph: GridGraph) -> bool:
        """
        Checks the carved structure is a spanning tree:
        N-1 edges and a single connected component (which, with N-1 edges, rules out cycles).
        """
        n = len(graph)
        if graph.edge_count() != n - 1:
            return False

        seen = bytearray(n)
        seen[0] = 1
        reached = 1
        queue = deque([0])
        while queue:
            idx = queue.popleft()
            for other in graph.cells[idx].edges:
                if not seen[other]:
                    seen[other] = 1
                    reached += 1
                    queue.append(other)

        return reached == n

    @staticmethod
    def calculate_stats(graph: GridGraph):
        dead_ends = 0
        corridors = 0
        junctions = 0 # 3 or 4 exits
        isolated = 0

        for cell in graph.cells:
            exits = len(cell.edges)
            if exits == 0: isolated += 1
            elif exits == 1: dead_ends += 1
            elif exits == 2: corridors += 1
            else: junctions += 1

        total = len(graph)
        return {
            "edges": graph.edge_count(),
            "dead_ends": dead_ends,
            "corridors": corridors,
            "junctions": junctions,
            "isolated": isolated,
            "dead_end_percent": (dead_ends / total) * 100 if total > 0 else 0
        }
