"""
Batch fetch-and-extract with a bounded worker pool.

run_batch fetches every URL through the injected fetch function, extracts
product data from each page and returns one record per URL in input order.
A failed URL becomes a failure record; it never stops the rest of the batch.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from app.core.config import settings
from app.fetch.base import FetchError, FetchFn
from app.fetch.extractor import extract_product
from app.fetch.utils import sku_id_from_url
from app.schemas import BatchResult, BatchResultRecord

logger = logging.getLogger(__name__)

DEADLINE_MESSAGE = "Batch deadline exceeded before this URL was fetched"


class BatchInputError(ValueError):
    """The batch call itself is malformed; no work was started."""


@dataclass(frozen=True)
class FetchTask:
    original_index: int
    url: str


def clamp_concurrency(limit: Optional[int]) -> int:
    """Clamp a requested worker count into [1, MAX_CONCURRENCY]; None means the default."""
    if limit is None:
        limit = settings.DEFAULT_CONCURRENCY
    return max(1, min(int(limit), settings.MAX_CONCURRENCY))


def _error_text(exc: Exception) -> str:
    return str(exc) or exc.__class__.__name__


def _success(task: FetchTask, markup: str) -> BatchResultRecord:
    return BatchResultRecord(
        original_index=task.original_index,
        url=task.url,
        success=True,
        extraction=extract_product(markup, url=task.url),
        sku=sku_id_from_url(task.url),
    )


def _failure(task: FetchTask, message: str, status_code: Optional[int] = None) -> BatchResultRecord:
    return BatchResultRecord(
        original_index=task.original_index,
        url=task.url,
        success=False,
        error_message=message,
        sku=sku_id_from_url(task.url),
        status_code=status_code,
    )


async def _process(task: FetchTask, fetch_fn: FetchFn) -> BatchResultRecord:
    try:
        markup = await fetch_fn(task.url)
        return _success(task, markup)
    except Exception as e:
        logger.warning("Scrape failed for %s: %s", task.url, _error_text(e))
        status_code = e.status_code if isinstance(e, FetchError) else None
        return _failure(task, _error_text(e), status_code)


async def _worker(
    queue: "asyncio.Queue[FetchTask]",
    results: List[Optional[BatchResultRecord]],
    fetch_fn: FetchFn,
    expires_at: Optional[float],
) -> None:
    loop = asyncio.get_running_loop()
    while True:
        try:
            task = queue.get_nowait()
        except asyncio.QueueEmpty:
            return

        if expires_at is not None and loop.time() >= expires_at:
            results[task.original_index] = _failure(task, DEADLINE_MESSAGE)
        else:
            results[task.original_index] = await _process(task, fetch_fn)
        queue.task_done()


async def run_batch(
    urls: Sequence[str],
    concurrency_limit: Optional[int],
    fetch_fn: FetchFn,
    deadline: Optional[float] = None,
) -> BatchResult:
    """
    Fetch and extract every URL with at most `concurrency_limit` fetches in flight.

    Args:
        urls: Non-empty list of product page URLs
        concurrency_limit: Requested worker count, clamped to 1-10
        fetch_fn: Async callable returning page markup or raising
        deadline: Optional seconds after which still-queued URLs are recorded
            as failures without being fetched. In-flight fetches are not cancelled.

    Returns:
        BatchResult whose results[i] describes urls[i]

    Raises:
        BatchInputError: urls is empty or contains a blank entry
    """
    if not urls:
        raise BatchInputError("At least one URL is required")
    if isinstance(urls, str):
        raise BatchInputError("urls must be a list of URLs, not a single string")
    for url in urls:
        if not isinstance(url, str) or not url.strip():
            raise BatchInputError("URLs must be non-empty strings")

    workers_count = min(clamp_concurrency(concurrency_limit), len(urls))

    # Sized up front: each worker writes only to the index of the task it claimed
    results: List[Optional[BatchResultRecord]] = [None] * len(urls)

    queue: "asyncio.Queue[FetchTask]" = asyncio.Queue()
    for index, url in enumerate(urls):
        queue.put_nowait(FetchTask(original_index=index, url=url))

    expires_at = None
    if deadline is not None:
        expires_at = asyncio.get_running_loop().time() + deadline

    logger.info("Starting batch: %d URLs, %d workers", len(urls), workers_count)
    await asyncio.gather(
        *(_worker(queue, results, fetch_fn, expires_at) for _ in range(workers_count))
    )

    batch = BatchResult(results=[r for r in results if r is not None])
    if batch.total != len(urls):
        raise RuntimeError("Batch finished with unfilled result slots")
    logger.info(
        "Batch finished: %d total, %d successful, %d failed",
        batch.total, batch.successful, batch.failed,
    )
    return batch
