"""Tests for metrics collection."""

from urlhash.utils.monitoring import FetchMonitor, MetricsCollector


def test_monitor_tracks_in_flight_peak():
    monitor = FetchMonitor()

    monitor.task_started()
    monitor.task_started()
    monitor.task_finished(0.1)
    monitor.task_started()
    monitor.task_finished(0.1)
    monitor.task_finished(0.1)

    assert monitor.max_in_flight == 2
    assert monitor.metrics.get_value('urlhash_in_flight') == 0
    assert monitor.metrics.get_value('urlhash_requests_total') == 3


def test_summary_counts_errors_and_bytes():
    monitor = FetchMonitor()
    monitor.record_error('transport')
    monitor.record_error('http_status')
    monitor.record_success(12)

    summary = monitor.get_summary()

    assert summary['errors'] == 2
    assert summary['bytes_hashed'] == 12


def test_collectors_use_separate_registries():
    first, second = MetricsCollector(), MetricsCollector()
    first.requests_total.inc()

    assert first.get_value('urlhash_requests_total') == 1
    assert second.get_value('urlhash_requests_total') == 0
    assert 'urlhash_requests_total' in first.export_text()


def test_prometheus_server_disabled_by_default():
    # must not try to bind a port
    MetricsCollector().start_prometheus_server()
