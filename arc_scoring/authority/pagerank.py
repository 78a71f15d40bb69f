"""PageRank over the tracked follow graph.

The graph is compiled once into index arrays (``GraphIndex``), and the
power-iteration step is a plain function of (graph, scores, damping) so
callers and tests can substitute their own step. Iteration stops when the
L1 change drops below the convergence threshold, or at the hard iteration
cap, whichever comes first.

Example:
    index = GraphIndex.build(["a", "b"], [FollowEdge("a", "b"), FollowEdge("b", "a")])
    result = run_pagerank(index, damping=0.85, convergence_threshold=1e-9, max_iterations=100)
    # result.scores == {"a": 0.5, "b": 0.5}
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

import numpy as np

from arc_scoring.schemas import FollowEdge


@dataclass(frozen=True)
class GraphIndex:
    """Directed graph compiled to integer index arrays.

    Attributes:
        node_ids: Sorted node identifiers; position is the node index.
        src: Source index per edge.
        dst: Destination index per edge.
        out_degree: Out-degree per node.
    """

    node_ids: tuple[str, ...]
    src: np.ndarray
    dst: np.ndarray
    out_degree: np.ndarray

    @property
    def size(self) -> int:
        return len(self.node_ids)

    @property
    def edge_count(self) -> int:
        return int(self.src.shape[0])

    @classmethod
    def build(cls, node_ids: Iterable[str], edges: Iterable[FollowEdge]) -> "GraphIndex":
        """Compile edges restricted to ``node_ids``.

        Edges with an endpoint outside the node set, self-loops, and
        repeated (src, dst) pairs are dropped.
        """
        ordered = tuple(sorted(set(node_ids)))
        position = {node_id: i for i, node_id in enumerate(ordered)}

        pairs: set[tuple[int, int]] = set()
        for edge in edges:
            s = position.get(edge.src_id)
            d = position.get(edge.dst_id)
            if s is None or d is None or s == d:
                continue
            pairs.add((s, d))

        sorted_pairs = sorted(pairs)
        src = np.array([p[0] for p in sorted_pairs], dtype=np.int64)
        dst = np.array([p[1] for p in sorted_pairs], dtype=np.int64)
        out_degree = np.bincount(src, minlength=len(ordered)).astype(np.float64)

        return cls(node_ids=ordered, src=src, dst=dst, out_degree=out_degree)

    def in_neighbors(self, node_id: str) -> list[str]:
        """Ids of nodes with an edge into ``node_id``."""
        try:
            target = self.node_ids.index(node_id)
        except ValueError:
            return []
        return [self.node_ids[s] for s in self.src[self.dst == target]]


PageRankStep = Callable[[GraphIndex, np.ndarray, float], np.ndarray]


def pagerank_step(index: GraphIndex, scores: np.ndarray, damping: float) -> np.ndarray:
    """One power-iteration step.

    ``new = (1 - d) / n + d * (sum of in-neighbour shares + dangling / n)``.
    Mass held by nodes without out-edges is spread uniformly so scores keep
    summing to 1.
    """
    n = index.size
    if n == 0:
        return scores

    shares = scores[index.src] / index.out_degree[index.src]
    incoming = np.bincount(index.dst, weights=shares, minlength=n)
    dangling = scores[index.out_degree == 0].sum()

    return (1.0 - damping) / n + damping * (incoming + dangling / n)


@dataclass
class PageRankResult:
    """Outcome of a PageRank run."""

    scores: dict[str, float]
    iterations: int
    converged: bool
    delta: float


def run_pagerank(
    index: GraphIndex,
    *,
    damping: float,
    convergence_threshold: float,
    max_iterations: int,
    step: PageRankStep = pagerank_step,
    initial: Sequence[float] | None = None,
) -> PageRankResult:
    """Iterate ``step`` to a fixed point or the iteration cap.

    Args:
        index: Compiled graph.
        damping: Damping factor in (0, 1).
        convergence_threshold: L1 change below which iteration stops.
        max_iterations: Hard cap on iterations.
        step: Iteration function, injectable for tests.
        initial: Starting vector (default: uniform).

    Returns:
        PageRankResult. When the cap is hit, ``converged`` is False and
        ``scores`` holds the last iteration's values.
    """
    n = index.size
    if n == 0:
        return PageRankResult(scores={}, iterations=0, converged=True, delta=0.0)

    if initial is None:
        scores = np.full(n, 1.0 / n, dtype=np.float64)
    else:
        scores = np.asarray(initial, dtype=np.float64)
        if scores.shape != (n,):
            raise ValueError(f"initial vector must have length {n}")

    delta = float("inf")
    iterations = 0
    converged = False

    for iterations in range(1, max_iterations + 1):
        updated = step(index, scores, damping)
        delta = float(np.abs(updated - scores).sum())
        scores = updated
        if delta < convergence_threshold:
            converged = True
            break

    return PageRankResult(
        scores={node_id: float(scores[i]) for i, node_id in enumerate(index.node_ids)},
        iterations=iterations,
        converged=converged,
        delta=delta,
    )
