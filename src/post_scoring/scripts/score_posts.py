# src/post_scoring/scripts/score_posts.py
"""Run one post scoring pass against the configured database."""
from __future__ import annotations

import argparse
import asyncio
import logging

from post_scoring.core.settings import settings
from post_scoring.db.session import SessionLocal, create_tables, engine
from post_scoring.services.scheduler import PostScoringJob


async def _main(init_db: bool) -> int:
    try:
        if init_db:
            await create_tables()
        summary = await PostScoringJob(SessionLocal, limits=settings.scoring_limits).run()
    finally:
        await engine.dispose()
    return summary.updated


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Recompute post quality and spam scores.")
    parser.add_argument("--init-db", action="store_true", help="create missing tables first")
    parser.add_argument("--verbose", action="store_true", help="log per-post score breakdowns")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    updated = asyncio.run(_main(args.init_db))
    print(f"updated={updated}")


if __name__ == "__main__":
    main()
