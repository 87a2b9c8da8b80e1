# File: stormgen/utils.py
"""
stormgen - Utility helpers
===========================
Small helpers shared by the processor and the CLI.
"""

from __future__ import annotations

import logging
import time
from typing import List, Optional

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("stormgen.utils")


class Timer:
    """
    Context-manager timer for pipeline steps.

    Usage:
        with Timer("process entities") as t:
            ...
        print(t.elapsed)
    """

    __slots__ = ("label", "start_time", "elapsed")

    def __init__(self, label: str = "operation") -> None:
        self.label: str = label
        self.start_time: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[object],
    ) -> None:
        self.elapsed = time.perf_counter() - self.start_time
        logger.debug("Timer [%s]: %.4f seconds", self.label, self.elapsed)

    def __repr__(self) -> str:
        return f"<Timer {self.label}: {self.elapsed:.4f}s>"


__all__: List[str] = ["Timer"]
