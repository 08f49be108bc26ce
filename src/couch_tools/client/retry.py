"""Opt-in retry for callers' read-modify-write sequences.

The client itself never retries. Operations such as document_update() with
a bare id, view_add() or attachment_create() read a revision and then
write; a concurrent writer in between makes the write fail with
ResourceConflictError. Callers who want to retry that should wrap their
own function with retry_on_conflict().
"""

import logging

from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from .exceptions import ResourceConflictError

logger = logging.getLogger("couch-tools")


def retry_on_conflict(attempts: int = 3, initial: float = 0.1, max_wait: float = 2.0):
    """Create a retry decorator that retries on 409 conflicts only.

    Args:
        attempts: Total number of attempts, including the first
        initial: Initial backoff in seconds
        max_wait: Maximum backoff in seconds

    Returns:
        A tenacity retry decorator. The last ResourceConflictError is
        re-raised when attempts run out.

    Example:
        @retry_on_conflict()
        def bump(api, doc_id):
            doc = api.document_get("counters", doc_id)
            return api.document_update("counters", doc, {**doc, "n": doc["n"] + 1})
    """
    return retry(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential_jitter(initial=initial, max=max_wait, jitter=initial),
        retry=retry_if_exception_type(ResourceConflictError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
