"""
note_writer.py  –  Template rendering & batched note output
============================================================
Shared output layer for all recipes.

  • render_template() – renders a Markdown template from templates/ with jinja2
  • NoteBatch         – collects pending writes and joins them before it reports

Templates contain dataviewjs / chartsview payloads consumed by the note viewer.
Only the {{ KEY }} expressions are rendered; field values are inserted as-is
and never expanded again.
"""

from __future__ import annotations

import logging
import os
import sys
from multiprocessing.pool import ThreadPool
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined

# ── Project root on sys.path for config import ────────────────────────────────
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from config.settings import NOTE_ENCODING, TEMPLATES_DIR, WRITE_WORKERS

log = logging.getLogger("note_writer")


# ─────────────────────────────────────────────────────────────────────────────
# TEMPLATES
# ─────────────────────────────────────────────────────────────────────────────

# Notes are Markdown, not HTML: no autoescaping. A missing field is an error.
TEMPLATE_ENV = Environment(
    loader=FileSystemLoader(TEMPLATES_DIR, encoding=NOTE_ENCODING),
    keep_trailing_newline=True,
    autoescape=False,
    undefined=StrictUndefined,
)


def render_template(name: str, **fields) -> str:
    """Render ``templates/<name>`` with ``fields``. Raises ``jinja2.UndefinedError`` on a missing field."""
    return TEMPLATE_ENV.get_template(name).render(**fields)


# ─────────────────────────────────────────────────────────────────────────────
# DIRECTORIES
# ─────────────────────────────────────────────────────────────────────────────

def ensure_directory(path: Path) -> None:
    if path.is_dir():
        log.debug("Directory already exists: %s", path)
        return
    log.info("Creating directory: %s", path)
    path.mkdir(parents=True, exist_ok=True)


# ─────────────────────────────────────────────────────────────────────────────
# WRITE BATCH
# ─────────────────────────────────────────────────────────────────────────────

def write_note(job: tuple[Path, str]) -> Optional[str]:
    """
    Write one note. Returns None on success, the error message otherwise.
    A failed write never raises – the other notes of the batch still land.
    """
    path, content = job
    try:
        ensure_directory(path.parent)
        with open(path, "w", encoding=NOTE_ENCODING, newline="\n") as fh:
            fh.write(content)
    except OSError as exc:
        log.error("Error writing note %s: %s", path, exc)
        return str(exc)
    log.debug("Wrote note: %s", path)
    return None


class NoteBatch:
    """
    Scoped batch of pending note writes.

    Notes are queued with ``add()`` and written by ``flush()`` (or on leaving the
    ``with`` block). ``flush()`` returns only after every queued write has
    finished, so callers never report success while writes are outstanding.

    Pending writes are keyed by path: at most one write per file is in flight,
    and a later ``add()`` for a queued path replaces the earlier content.
    """

    def __init__(self, label: str = "notes", workers: int = WRITE_WORKERS):
        self.label = label
        self.workers = max(1, workers)
        self._pending: dict[Path, str] = {}
        self.written = 0
        self.failed: list[Path] = []

    def add(self, path: Path, content: str) -> None:
        path = Path(path)
        if path in self._pending:
            log.warning("Replacing queued note %s (same target written twice)", path)
        self._pending[path] = content

    def __len__(self) -> int:
        return len(self._pending)

    @property
    def ok(self) -> bool:
        return not self.failed

    def flush(self) -> bool:
        jobs = list(self._pending.items())
        self._pending = {}
        if not jobs:
            return self.ok

        # pool.map blocks until every job has returned
        with ThreadPool(processes=min(self.workers, len(jobs))) as pool:
            errors = pool.map(write_note, jobs)

        for (path, _), err in zip(jobs, errors):
            if err is None:
                self.written += 1
            else:
                self.failed.append(path)

        log.info("Wrote %d %s  |  Failed: %d", self.written, self.label, len(self.failed))
        return self.ok

    def __enter__(self) -> "NoteBatch":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.flush()
        else:
            log.error("Discarding %d pending %s after error.", len(self._pending), self.label)
            self._pending = {}
