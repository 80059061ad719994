# File: gibsonpool/app/core/pool/errors.py
# Version: v0.1.2
"""
Per-sequence (recoverable) error records and the sink they are reported to.

A sequence that cannot be handled (no usable enzyme, no unique junction) is
dropped from the run; the batch continues. Fatal errors are plain exceptions
raised where they happen and are not routed through here.

v0.1.2
- Sink is thread-safe, so one sink can be shared across designers.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Iterator, List, Optional

NO_COMPATIBLE_ENZYME = "NO_COMPATIBLE_ENZYME"
REGION_WITH_NO_UNIQUE_KMERS = "REGION_WITH_NO_UNIQUE_KMERS"


@dataclass(frozen=True)
class SequenceError:
    code: str
    sequence_id: str
    detail: str = ""

    def as_line(self) -> str:
        return f"{self.code}\t{self.sequence_id}"


class ErrorSink:
    """In-memory collector; every report is also logged as a warning."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.log = logger or logging.getLogger(__name__)
        self._errors: List[SequenceError] = []
        self._lock = threading.Lock()

    def report(self, code: str, sequence_id: str, detail: str = "") -> SequenceError:
        err = SequenceError(code=code, sequence_id=sequence_id, detail=detail)
        with self._lock:
            self._errors.append(err)
        if detail:
            self.log.warning("%s\t%s (%s)", code, sequence_id, detail)
        else:
            self.log.warning("%s\t%s", code, sequence_id)
        return err

    @property
    def errors(self) -> List[SequenceError]:
        with self._lock:
            return list(self._errors)

    def sequence_ids(self, code: Optional[str] = None) -> List[str]:
        return [e.sequence_id for e in self.errors if code is None or e.code == code]

    def __len__(self) -> int:
        with self._lock:
            return len(self._errors)

    def __iter__(self) -> Iterator[SequenceError]:
        return iter(self.errors)
