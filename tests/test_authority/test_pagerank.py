"""Tests for GraphIndex and the PageRank iteration."""

import numpy as np
import pytest

from arc_scoring.authority.pagerank import GraphIndex, pagerank_step, run_pagerank
from arc_scoring.schemas import FollowEdge


def _run(index: GraphIndex, **kwargs):
    params = {"damping": 0.85, "convergence_threshold": 1e-12, "max_iterations": 1000}
    params.update(kwargs)
    return run_pagerank(index, **params)


class TestGraphIndex:
    """Tests for graph compilation."""

    def test_drops_unknown_endpoints_and_self_loops(self):
        index = GraphIndex.build(
            ["a", "b"],
            [
                FollowEdge("a", "b"),
                FollowEdge("a", "a"),
                FollowEdge("a", "zzz"),
                FollowEdge("a", "b"),
            ],
        )
        assert index.node_ids == ("a", "b")
        assert index.edge_count == 1
        assert index.out_degree.tolist() == [1.0, 0.0]

    def test_in_neighbors(self, cycle_edges):
        index = GraphIndex.build(["a", "b", "c"], cycle_edges)
        assert index.in_neighbors("a") == ["c"]
        assert index.in_neighbors("missing") == []

    def test_empty(self):
        index = GraphIndex.build([], [])
        assert index.size == 0
        assert index.edge_count == 0


class TestRunPageRank:
    """Tests for power iteration."""

    def test_two_cycle(self):
        index = GraphIndex.build(["a", "b"], [FollowEdge("a", "b"), FollowEdge("b", "a")])
        result = _run(index)
        assert result.converged
        assert result.scores["a"] == pytest.approx(0.5)
        assert result.scores["b"] == pytest.approx(0.5)

    def test_three_cycle(self, cycle_edges):
        index = GraphIndex.build(["a", "b", "c"], cycle_edges)
        result = _run(index)
        for value in result.scores.values():
            assert value == pytest.approx(1 / 3)

    def test_scores_sum_to_one_with_dangling_nodes(self):
        index = GraphIndex.build(
            ["a", "b", "c", "d"],
            [FollowEdge("b", "a"), FollowEdge("c", "a"), FollowEdge("d", "b")],
        )
        result = _run(index)
        assert sum(result.scores.values()) == pytest.approx(1.0)
        assert result.scores["a"] == max(result.scores.values())

    def test_empty_graph(self):
        result = _run(GraphIndex.build([], []))
        assert result.scores == {}
        assert result.converged

    def test_iteration_cap_returns_last_iteration(self):
        index = GraphIndex.build(["a", "b"], [FollowEdge("a", "b")])
        result = _run(index, max_iterations=1)
        assert not result.converged
        assert result.iterations == 1
        assert result.scores["a"] == pytest.approx(0.2875)
        assert result.scores["b"] == pytest.approx(0.7125)

    def test_injected_step(self):
        index = GraphIndex.build(["a", "b"], [FollowEdge("a", "b")])
        calls = []

        def fixed_point(idx, scores, damping):
            calls.append(damping)
            return scores

        result = _run(index, step=fixed_point)
        assert result.converged
        assert result.iterations == 1
        assert calls == [0.85]

    def test_initial_vector_length_checked(self):
        index = GraphIndex.build(["a", "b"], [FollowEdge("a", "b")])
        with pytest.raises(ValueError):
            _run(index, initial=[1.0])


def test_pagerank_step_preserves_mass():
    index = GraphIndex.build(["a", "b", "c"], [FollowEdge("a", "b")])
    scores = np.full(3, 1 / 3)
    updated = pagerank_step(index, scores, 0.85)
    assert updated.sum() == pytest.approx(1.0)
