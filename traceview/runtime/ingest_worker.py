"""Background ingestion worker for trace files.

Ingestion is the only slow step, so it runs on a daemon thread and reports
progress through a message queue the caller drains. Requests are
latest-wins: scheduling a newer request (or calling ``cancel``) makes any
in-flight work stale, and its messages are dropped rather than delivered.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from queue import Empty, Queue

from ..trace_model.build import IngestCancelled, IngestProgress, IngestResult, ingest_trace

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestRequest:
    """One single-trace or compare (A + B) ingestion job."""

    request_id: int
    text_a: str
    text_b: str | None = None

    @property
    def is_compare(self) -> bool:
        return self.text_b is not None


@dataclass(frozen=True)
class IngestProgressMessage:
    request_id: int
    progress: IngestProgress


@dataclass(frozen=True)
class IngestDoneMessage:
    """Finished request; ``result_b`` is set only for compare requests."""

    request_id: int
    result_a: IngestResult
    result_b: IngestResult | None = None


@dataclass(frozen=True)
class IngestFailure:
    request_id: int
    message: str


IngestMessage = IngestProgressMessage | IngestDoneMessage | IngestFailure


class TraceIngestScheduler:
    """Single-threaded latest-request-wins trace ingestion scheduler."""

    def __init__(self, ingest: Callable[..., IngestResult] = ingest_trace) -> None:
        self._ingest = ingest
        self._lock = threading.Lock()
        self._pending: IngestRequest | None = None
        self._running = False
        self._next_request_id = 1
        self._latest_request_id = 0
        self._messages: Queue[IngestMessage] = Queue()

    def _is_stale(self, request_id: int) -> bool:
        with self._lock:
            return request_id != self._latest_request_id

    def _post(self, message: IngestMessage) -> None:
        # Stale check and enqueue happen under one lock hold.
        with self._lock:
            if message.request_id != self._latest_request_id:
                return
            self._messages.put(message)

    def _run_request(self, request: IngestRequest) -> None:
        def on_progress(progress: IngestProgress) -> None:
            self._post(IngestProgressMessage(request.request_id, progress))

        def is_cancelled() -> bool:
            return self._is_stale(request.request_id)

        result_a = self._ingest(request.text_a, "A", on_progress=on_progress, is_cancelled=is_cancelled)
        result_b = None
        if request.is_compare:
            result_b = self._ingest(request.text_b, "B", on_progress=on_progress, is_cancelled=is_cancelled)
        self._post(IngestDoneMessage(request.request_id, result_a, result_b))

    def _worker(self) -> None:
        while True:
            with self._lock:
                request = self._pending
                self._pending = None
                if request is None:
                    self._running = False
                    return

            try:
                self._run_request(request)
            except IngestCancelled:
                logger.debug("Ingest request %d abandoned", request.request_id)
            except Exception as exc:
                logger.exception("Ingest request %d failed", request.request_id)
                self._post(IngestFailure(request.request_id, str(exc)))

    def schedule(self, text_a: str, text_b: str | None = None) -> int:
        """Queue/replace pending ingestion work and return its request id.

        Passing ``text_b`` makes a compare request: A is ingested first, then
        B, and both results arrive together in one ``IngestDoneMessage``.
        """
        with self._lock:
            request_id = self._next_request_id
            self._next_request_id += 1
            self._latest_request_id = request_id
            self._pending = IngestRequest(request_id=request_id, text_a=text_a, text_b=text_b)
            if self._running:
                return request_id
            self._running = True

        worker = threading.Thread(
            target=self._worker,
            name="traceview-ingest",
            daemon=True,
        )
        worker.start()
        return request_id

    def cancel(self) -> None:
        """Abandon pending and in-flight work; partial results are discarded."""
        with self._lock:
            self._pending = None
            self._latest_request_id = self._next_request_id
            self._next_request_id += 1

    def drain_messages(self) -> list[IngestMessage]:
        """Drain queued progress/result/failure messages of the latest request.

        Messages queued before a later ``schedule`` or ``cancel`` are dropped.
        """
        out: list[IngestMessage] = []
        while True:
            try:
                message = self._messages.get_nowait()
            except Empty:
                break
            if not self._is_stale(message.request_id):
                out.append(message)
        return out


__all__ = [
    "IngestRequest",
    "IngestProgressMessage",
    "IngestDoneMessage",
    "IngestFailure",
    "IngestMessage",
    "TraceIngestScheduler",
]
