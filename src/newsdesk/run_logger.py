"""Run logger for recording per-source fetch outcomes to JSON files."""

import uuid
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel

from newsdesk.sources.base import SourceResult


class SourceRecord(BaseModel):
    """Record of a single source fetch within a run."""

    source_id: str
    url: str | None = None
    article_count: int = 0
    error: str | None = None
    timestamp: str = ""
    duration_seconds: float = 0.0


class RunRecord(BaseModel):
    """Record of one aggregation run (one page, one source set)."""

    run_id: str
    page: int
    sources_key: str
    started_at: str
    completed_at: str | None = None
    sources: list[SourceRecord] = []
    final_article_count: int = 0


class RunLogger:
    """Builds run records and writes one JSON log file per aggregation run.

    Several runs may be in flight at once (the article resolver loads pages
    concurrently), so the record is returned to the caller rather than kept
    on the logger. When ``enabled=False``, all methods are no-ops.

    Args:
        log_dir: Directory to write JSON log files.
        enabled: If False, all methods become no-ops.
    """

    def __init__(self, log_dir: Path, *, enabled: bool = True) -> None:
        self._log_dir = log_dir
        self._enabled = enabled
        self._last_log_path: Path | None = None

    @property
    def enabled(self) -> bool:
        """Whether logging is active."""
        return self._enabled

    @property
    def last_log_path(self) -> Path | None:
        """Path to the last written log file, or None."""
        return self._last_log_path

    def start_run(self, page: int, sources_key: str) -> RunRecord | None:
        """Create a new run record.

        Args:
            page: Requested page number.
            sources_key: Normalized source-set key of the request.

        Returns:
            The record to pass to ``log_source``/``finish_run``, or None if
            logging is disabled.
        """
        if not self._enabled:
            return None

        return RunRecord(
            run_id=str(uuid.uuid4()),
            page=page,
            sources_key=sources_key,
            started_at=datetime.now(tz=UTC).isoformat(),
        )

    def log_source(
        self,
        record: RunRecord | None,
        result: SourceResult,
        duration_seconds: float,
    ) -> None:
        """Append the outcome of one source fetch to ``record``."""
        if not self._enabled or record is None:
            return

        record.sources.append(
            SourceRecord(
                source_id=result.source_id,
                url=result.url,
                article_count=len(result.articles),
                error=result.error,
                timestamp=datetime.now(tz=UTC).isoformat(),
                duration_seconds=round(duration_seconds, 4),
            )
        )

    def finish_run(self, record: RunRecord | None, article_count: int) -> Path | None:
        """Write the run record to a JSON file.

        Args:
            record: Record returned by ``start_run``.
            article_count: Number of articles in the merged page.

        Returns:
            Path to the written JSON file, or None if logging is disabled.
        """
        if not self._enabled or record is None:
            return None

        record.completed_at = datetime.now(tz=UTC).isoformat()
        record.final_article_count = article_count

        self._log_dir.mkdir(parents=True, exist_ok=True)

        # run_2026-02-12T14-30-00_p1_1a2b3c4d.json (colons → dashes)
        ts = record.started_at.replace(":", "-")
        ts = ts.split(".")[0].split("+")[0]
        filename = f"run_{ts}_p{record.page}_{record.run_id[:8]}.json"
        filepath = self._log_dir / filename

        filepath.write_text(record.model_dump_json(indent=2), encoding="utf-8")
        self._last_log_path = filepath
        return filepath
