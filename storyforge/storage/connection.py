from __future__ import annotations

import time
from pathlib import Path
from typing import Callable

from storyforge.logs import get_logger
from storyforge.storage.doc_store import DocStore

logger = get_logger(__name__)


def backoff_delays(attempts: int, base_s: float, max_s: float) -> list[float]:
    """Delays slept between attempts: base, 2*base, 4*base ... capped at ``max_s``."""
    return [min(max_s, base_s * (2 ** i)) for i in range(max(0, attempts - 1))]


def open_store_with_retry(
    data_dir: Path,
    attempts: int = 5,
    base_s: float = 0.5,
    max_s: float = 8.0,
    sleep: Callable[[float], None] = time.sleep,
    factory: Callable[[Path], DocStore] = DocStore,
) -> DocStore:
    delays = backoff_delays(attempts, base_s, max_s)
    attempt = 0
    while True:
        attempt += 1
        try:
            store = factory(Path(data_dir))
            logger.info("store opened | data_dir=%s attempt=%d", data_dir, attempt)
            return store
        except OSError as exc:
            if attempt > len(delays):
                logger.error("store unavailable after %d attempts | data_dir=%s", attempt, data_dir)
                raise
            delay = delays[attempt - 1]
            logger.warning("store open failed | attempt=%d retry_in=%.2fs error=%s", attempt, delay, exc)
            sleep(delay)
