"""Tests for the Prometheus metrics collector."""

from arc_scoring.observability.metrics import get_metrics


def _value(counter, **labels) -> float:
    return counter.labels(**labels)._value.get()


def test_singleton():
    assert get_metrics() is get_metrics()


def test_record_unit():
    metrics = get_metrics()
    before = _value(metrics.batch_units, batch="metrics_test", status="error")
    metrics.record_unit("metrics_test", "error", latency=0.2)
    assert _value(metrics.batch_units, batch="metrics_test", status="error") == before + 1


def test_record_snapshots_ignores_zero():
    metrics = get_metrics()
    before = _value(metrics.snapshots_written, kind="metrics_test")
    metrics.record_snapshots("metrics_test", 0)
    metrics.record_snapshots("metrics_test", 3)
    assert _value(metrics.snapshots_written, kind="metrics_test") == before + 3


def test_record_pagerank_capped():
    metrics = get_metrics()
    before = _value(metrics.authority_runs, status="capped")
    metrics.record_pagerank(100, converged=False)
    assert _value(metrics.authority_runs, status="capped") == before + 1
