"""
Helper utilities shared by the CRUD pages and diagnostics
"""
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed

from django.conf import settings

logger = logging.getLogger(__name__)


def run_concurrently(tasks, fallback=None, max_workers=None):
    """
    Run independent callables on a thread pool and join them.

    Args:
        tasks: dict of key -> zero-argument callable
        fallback: callable(key, exception) giving the result of a failed task
        max_workers: pool size (default RELATION_FETCH_WORKERS)

    Returns:
        dict of key -> result, one entry per task

    A failing task only affects its own key. Pending tasks are cancelled
    when the join is left early.
    """
    if not tasks:
        return {}

    workers = max_workers or settings.RELATION_FETCH_WORKERS
    executor = ThreadPoolExecutor(max_workers=min(workers, len(tasks)))
    results = {}

    try:
        futures = {executor.submit(task): key for key, task in tasks.items()}
        for future in as_completed(futures):
            key = futures[future]
            try:
                results[key] = future.result()
            except Exception as e:
                if fallback is None:
                    raise
                logger.warning(f"Task {key} failed: {e}")
                results[key] = fallback(key, e)
    finally:
        executor.shutdown(wait=True, cancel_futures=True)

    return results
