"""
ask.py — One-shot question against the indexed documents.

Embeds the question, retrieves the nearest documents from Qdrant and
prints the chat model's answer.  With ``--show-context`` the retrieved
context lines are printed first.

Run:  python -m docchat.scripts.ask "What color is the sky?"
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from docchat.config.settings import get_settings
from docchat.src.core.rag_engine import build_orchestrator
from docchat.src.utils.logger import configure_logging


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="ask", description="Ask a question over the indexed documents.")
    parser.add_argument("query", help="Natural-language question.")
    parser.add_argument("--show-context", action="store_true", default=False, help="Print the retrieved context before the answer.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = get_settings()
    configure_logging(settings.ENV)
    rag = build_orchestrator(settings)

    try:
        context = rag.retrieve_context(args.query)
        if args.show_context:
            for i, line in enumerate(context, 1):
                print(f"--- Context {i} ---")
                print(f"  {line}")
            print("=" * 60)

        print(rag.answer(args.query, context))
    finally:
        rag.vector_store.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
