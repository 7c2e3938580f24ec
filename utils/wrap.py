#!/usr/bin/env python3
"""Shared wrapper for bounded retries with exponential backoff."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Iterable

logger = logging.getLogger(__name__)


def with_retries(
    fn: Callable[[], Any],
    *,
    max_attempts: int,
    backoff_s: float,
    retry_on: Iterable[str],
    classify_exc: Callable[[Exception], str],
    sleep: Callable[[float], None] = time.sleep,
) -> Any:
    """Call `fn` until it succeeds, an error is classified as fatal, or attempts run out.

    The delay before retry n (1-based) is `backoff_s * 2 ** n`. The last error
    is re-raised unchanged.
    """
    retry_on = set(retry_on)
    attempt = 1
    while True:
        try:
            return fn()
        except Exception as e:  # noqa: BLE001
            code = classify_exc(e)
            logger.warning(f"Attempt {attempt}/{max_attempts} failed ({code}): {e}")
            if code not in retry_on or attempt >= max_attempts:
                raise
            delay = backoff_s * (2 ** attempt)
            logger.debug(f"Waiting {delay:.1f}s before retry...")
            sleep(delay)
            attempt += 1
