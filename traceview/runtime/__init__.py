"""Runtime services around the pure trace model.

Groups persisted view preferences (``config``) and the background
ingestion scheduler (``ingest_worker``).
"""

from __future__ import annotations

from .ingest_worker import (
    IngestDoneMessage,
    IngestFailure,
    IngestMessage,
    IngestProgressMessage,
    IngestRequest,
    TraceIngestScheduler,
)

__all__ = [
    "IngestDoneMessage",
    "IngestFailure",
    "IngestMessage",
    "IngestProgressMessage",
    "IngestRequest",
    "TraceIngestScheduler",
]
