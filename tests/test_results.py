"""Tests for outcomes and the result collector."""

import asyncio

import pytest

from urlhash.core.results import Outcome, ResultCollector, ResultEntry


def test_outcome_success_and_failure():
    success = Outcome.success("abc")
    failure = Outcome.failure("MyHTTP_Error: Status code 500")

    assert success.ok and success.text == "abc"
    assert not failure.ok and failure.text == "MyHTTP_Error: Status code 500"


def test_result_entry_format_line():
    entry = ResultEntry("http://example.com", Outcome.success("abc"))
    assert entry.format_line() == "http://example.com  abc"
    assert entry.result == "abc"


@pytest.mark.asyncio
async def test_collector_keeps_every_entry_from_concurrent_writers():
    collector = ResultCollector()

    async def produce(i):
        await asyncio.sleep(0)
        await collector.add(ResultEntry(f"http://host/{i % 10}", Outcome.success(str(i))))

    await asyncio.gather(*(produce(i) for i in range(200)))

    entries = collector.drain()
    assert len(entries) == len(collector) == 200
    assert sorted(int(e.result) for e in entries) == list(range(200))


@pytest.mark.asyncio
async def test_collector_drain_returns_a_copy():
    collector = ResultCollector()
    await collector.add(ResultEntry("http://a", Outcome.success("1")))

    drained = collector.drain()
    drained.clear()

    assert len(collector.drain()) == 1
