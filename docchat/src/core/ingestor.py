"""
DocChat - IngestionPipeline
============================
Indexes every file in a directory through the ``ChatOrchestrator``:
read bytes → extract → embed → upsert, one file at a time.

Key design decisions:
    • **Dependency Injection** – receives the orchestrator.
    • **Sequential** – one file, one round trip; no worker pool.
    • **Per-file isolation** – a failing file is logged and counted,
      the rest of the directory is still indexed.

Usage:
    from docchat.src.core.ingestor import IngestionPipeline
    pipeline = IngestionPipeline(orchestrator, Path("data/raw"))
    result   = pipeline.run()
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Any

from docchat.src.core.rag_engine import ChatOrchestrator
from docchat.src.utils.logger import get_logger

logger = get_logger(__name__)


class IngestionPipeline:
    """
    End-to-end directory ingestion.

    Parameters
    ----------
    orchestrator
        An initialised ``ChatOrchestrator`` (injected).
    source_dir
        Directory whose regular files are indexed, sorted by name.
    """

    def __init__(self, orchestrator: ChatOrchestrator, source_dir: Path) -> None:
        self._orchestrator = orchestrator
        self._source_dir = Path(source_dir)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC ENTRY POINT
    # ══════════════════════════════════════════════════════════════════

    def run(self) -> dict[str, Any]:
        """
        Index every file in the source directory.

        Returns
        -------
        dict
            Execution summary with keys:
            ``total_files``, ``files_indexed``, ``files_failed``,
            ``elapsed_seconds``.
        """
        t_start = time.perf_counter()
        source = self._source_dir

        if not source.is_dir():
            logger.warning("Source directory does not exist: %s", source)
            return self._summary(0, 0, 0, time.perf_counter() - t_start)

        files = sorted(f for f in source.iterdir() if f.is_file())
        if not files:
            logger.warning("No files found in %s", source)
            return self._summary(0, 0, 0, time.perf_counter() - t_start)

        logger.info("Starting ingestion — %d file(s) found in %s", len(files), source)

        files_indexed = 0
        files_failed = 0
        for filepath in files:
            if self._ingest_file(filepath):
                files_indexed += 1
            else:
                files_failed += 1

        elapsed = time.perf_counter() - t_start
        logger.info("Ingestion complete — %d file(s) indexed, %d failed in %.2fs.", files_indexed, files_failed, elapsed)
        return self._summary(len(files), files_indexed, files_failed, elapsed)

    # ══════════════════════════════════════════════════════════════════
    #  PER-FILE PROCESSING
    # ══════════════════════════════════════════════════════════════════

    def _ingest_file(self, filepath: Path) -> bool:
        """Index one file; ``False`` when it failed."""
        t_file = time.perf_counter()
        logger.info("Processing file: %s", filepath.name)
        try:
            self._orchestrator.index_file(filepath.name, filepath.read_bytes())
        except Exception:
            logger.exception("Failed to ingest file: %s", filepath.name)
            return False

        logger.info("Indexed %s in %.1fms", filepath.name, (time.perf_counter() - t_file) * 1000)
        return True


    @staticmethod
    def _summary(total: int, indexed: int, failed: int, elapsed: float) -> dict[str, Any]:
        return {"total_files": total, "files_indexed": indexed, "files_failed": failed, "elapsed_seconds": round(elapsed, 3)}
