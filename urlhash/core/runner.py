"""
Bounded-concurrency task runner: fetch and hash every URL, at most
``max_workers`` at a time, and collect one result per URL.
"""

import asyncio
import logging
import time
from typing import List, Optional, Sequence

from .errors import ERROR_PREFIX, FetchError
from .fetcher import Fetcher
from .hasher import ContentHasher
from .results import Outcome, ResultCollector, ResultEntry
from ..utils.config import Config, FetcherConfig
from ..utils.monitoring import FetchMonitor


class TaskRunner:
    """
    Runs one task per URL behind a semaphore of ``max_workers`` slots.

    Failures are recorded as ``Outcome`` data; ``run`` never raises because
    of an individual URL.
    """

    def __init__(self, max_workers: int, fetcher_config: Optional[FetcherConfig] = None,
                 monitor: Optional[FetchMonitor] = None):
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")

        self.max_workers = max_workers
        self.config = fetcher_config or FetcherConfig()
        self.hasher = ContentHasher(self.config.hash_algorithm)
        self.monitor = monitor or FetchMonitor()
        self.logger = logging.getLogger(__name__)

    def _make_fetcher(self) -> Fetcher:
        return Fetcher(
            request_timeout=self.config.request_timeout,
            max_body_size=self.config.max_body_size,
            user_agent=self.config.user_agent,
            connection_limit=self.max_workers,
        )

    async def run(self, urls: Sequence[str]) -> List[ResultEntry]:
        """
        Fetch and hash every URL.

        Returns:
            One ResultEntry per input URL, in completion order
        """
        gate = asyncio.Semaphore(self.max_workers)
        collector = ResultCollector()
        start_time = time.time()

        self.logger.info(f"Processing {len(urls)} URLs with {self.max_workers} workers")

        async with self._make_fetcher() as fetcher:
            tasks = [
                asyncio.create_task(self._run_task(url, fetcher, gate, collector))
                for url in urls
            ]
            await asyncio.gather(*tasks)

        results = collector.drain()
        self.logger.info(
            f"Processed {len(collector)} URLs in {time.time() - start_time:.2f}s "
            f"({sum(1 for r in results if not r.outcome.ok)} failed)"
        )
        return results

    async def _run_task(self, url: str, fetcher: Fetcher, gate: asyncio.Semaphore,
                        collector: ResultCollector):
        async with gate:
            self.monitor.task_started()
            start_time = time.time()
            try:
                outcome = await self._process_url(url, fetcher)
            finally:
                self.monitor.task_finished(time.time() - start_time)
        await collector.add(ResultEntry(url, outcome))

    async def _process_url(self, url: str, fetcher: Fetcher) -> Outcome:
        try:
            body = await fetcher.fetch(url)
        except FetchError as e:
            self.monitor.record_error(e.kind)
            self.logger.info(f"Failed {url}: {e}")
            return Outcome.failure(str(e))
        except Exception as e:
            self.monitor.record_error('unexpected')
            self.logger.error(f"Unexpected error processing {url}: {e}", exc_info=True)
            return Outcome.failure(f"{ERROR_PREFIX}: {e}")

        digest = self.hasher.hexdigest(body)
        self.monitor.record_success(len(body))
        self.logger.debug(f"Hashed {url}: {digest}")
        return Outcome.success(digest)


def run(urls: Sequence[str], max_workers: int, config: Optional[Config] = None,
        monitor: Optional[FetchMonitor] = None) -> List[ResultEntry]:
    """Blocking entry point: run every URL to completion and return the result set."""
    fetcher_config = config.fetcher if config else None
    runner = TaskRunner(max_workers, fetcher_config, monitor)
    return asyncio.run(runner.run(urls))
