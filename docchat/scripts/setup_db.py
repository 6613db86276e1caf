"""
DocChat - Collection Setup & Ingestion Script
===============================================
CLI entry point that orchestrates:
    1. Load settings (fail-fast on missing ``QDRANT_URL`` /
       ``QDRANT_COLLECTION_NAME`` / ``GOOGLE_API_KEY``).
    2. Build the orchestrator and create the Qdrant collection.
    3. Run the ``IngestionPipeline`` over the source directory.
    4. Print a structured execution summary.

Flags:
    --source-dir DIR  Directory to ingest (defaults to ``settings.DATA_RAW_DIR``).
    --init-only       Create the collection and exit (no ingestion).

Usage:
    python -m docchat.scripts.setup_db
    python -m docchat.scripts.setup_db --source-dir ./docs
    python -m docchat.scripts.setup_db --init-only
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

# ── Ensure project root is importable when run directly ────────────────
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


# ── CLI Argument Parsing ───────────────────────────────────────────────

def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="setup_db", description="DocChat — Create the Qdrant collection and index a directory of documents.")
    parser.add_argument("--source-dir", type=Path, default=None, help="Directory of .txt/.pdf/.docx files to index.")
    parser.add_argument("--init-only", action="store_true", default=False, help="Create the collection and exit (no ingestion).")
    return parser.parse_args(argv)


# ── Main Orchestration ─────────────────────────────────────────────────

def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    t_start = time.perf_counter()

    # ── 0. Load settings + .env ────────────────────────────────────────
    try:
        from docchat.config.settings import get_settings

        settings = get_settings()
    except Exception as exc:
        print("\n[FATAL] Configuration error — check your .env file:\n")
        print(f"  {exc}")
        print()
        return 1

    from docchat.src.utils.logger import configure_logging, get_logger
    configure_logging(settings.ENV)
    logger = get_logger(__name__)

    source_dir = args.source_dir or settings.DATA_RAW_DIR
    _print_header(settings, source_dir)

    # ── 1. Build orchestrator ──────────────────────────────────────────
    from docchat.src.core.rag_engine import build_orchestrator

    try:
        orchestrator = build_orchestrator(settings)
    except Exception:
        logger.exception("Failed to initialise models.")
        return 1

    # ── 2. Collection ──────────────────────────────────────────────────
    try:
        if not orchestrator.startup():
            logger.warning("Collection '%s' could not be created; indexing only works if it already exists.", settings.QDRANT_COLLECTION_NAME)

        if args.init_only:
            logger.info("--init-only: collection step done. Exiting.")
            return 0

        # ── 3. Run IngestionPipeline ───────────────────────────────────
        from docchat.src.core.ingestor import IngestionPipeline

        summary = IngestionPipeline(orchestrator, source_dir).run()
    finally:
        orchestrator.vector_store.close()

    # ── 4. Print execution summary ─────────────────────────────────────
    _print_footer(summary, time.perf_counter() - t_start)
    return 0 if summary["files_failed"] == 0 else 2


# ── Pretty-print helpers ──────────────────────────────────────────────

def _print_header(settings: object, source_dir: Path) -> None:
    api_key_val = settings.GOOGLE_API_KEY.get_secret_value()  # type: ignore[attr-defined]
    masked = f"****{api_key_val[-4:]}" if len(api_key_val) > 4 else "****"

    print()
    print("=" * 60)
    print("  DOCCHAT — Collection Setup & Ingestion")
    print("=" * 60)
    print(f"  Environment  : {settings.ENV}")                     # type: ignore[attr-defined]
    print(f"  Embedding    : {settings.EMBEDDING_MODEL}")         # type: ignore[attr-defined]
    print(f"  Qdrant       : {settings.QDRANT_URL}")              # type: ignore[attr-defined]
    print(f"  Collection   : {settings.QDRANT_COLLECTION_NAME}")  # type: ignore[attr-defined]
    print(f"  Source dir   : {source_dir}")
    print(f"  API Key      : {masked}")
    print("=" * 60)
    print()


def _print_footer(summary: dict, elapsed: float) -> None:
    print()
    print("=" * 60)
    print("  EXECUTION SUMMARY")
    print("-" * 60)
    print(f"  Total files scanned  : {summary['total_files']}")
    print(f"  Files indexed        : {summary['files_indexed']}")
    print(f"  Files failed         : {summary['files_failed']}")
    print(f"  Total elapsed        : {elapsed:>8.2f}s")
    print("=" * 60)
    print()


# ── Entry point ────────────────────────────────────────────────────────

if __name__ == "__main__":
    sys.exit(main())
