#!/usr/bin/env python3
"""Generate the static flipbook scrapbook for one Thanksgiving year.

Usage:
    python generate_scrapbook.py --year 2020   # build data/scrapbooks/2020.html
    python generate_scrapbook.py --list        # show generated scrapbooks

Exit code 0 on success, 1 with an ``error: <kind>: <message>`` line on any
generation failure.
"""
import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

sys.path.insert(0, str(Path(__file__).resolve().parent))

from sqlalchemy.orm import Session

from errors import ScrapbookError
from pipeline import stage1_load, stage3_assemble, stage4_render, stage5_publish
from pipeline.stage2_resolve import ReferenceResolver
from settings import Settings
from utils.database import make_engine, session_scope

logger = logging.getLogger("generate_scrapbook")


def generate(
    settings: Settings,
    year: int,
    session: Session,
    s3_client: Any = None,
    now: datetime | None = None,
) -> Path:
    """Run the whole pipeline for ``year`` and return the local HTML path.

    Nothing is written unless every reference resolves and the template
    splices cleanly; an S3 mirror failure alone never fails the run.
    """
    logger.info("=== Stage 1: Load content for %d ===", year)
    items = stage1_load.run(session, year)

    logger.info("=== Stage 2/3: Resolve references and assemble pages ===")
    plan = stage3_assemble.run(settings, year, items, ReferenceResolver(session))

    logger.info("=== Stage 4: Render HTML ===")
    html = stage4_render.run(settings, plan)

    logger.info("=== Stage 5: Publish ===")
    output_path = stage5_publish.run(
        settings, year, html, session=session, s3_client=s3_client, now=now,
    )
    stage3_assemble.write_plan_artifact(settings, plan)
    return output_path


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate a Thanksgiving scrapbook flipbook.")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--year", type=int, help="Year to generate")
    group.add_argument("--list", action="store_true", help="List generated scrapbooks")
    args = parser.parse_args(argv)

    settings = Settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
    )

    if args.list:
        for scrapbook in stage5_publish.list_scrapbooks(settings):
            print(f"{scrapbook.year}  {scrapbook.url}  {scrapbook.created:%Y-%m-%d %H:%M}")
        return 0

    engine = make_engine(settings)
    try:
        with session_scope(engine) as session:
            output_path = generate(
                settings,
                args.year,
                session,
                s3_client=stage5_publish.make_s3_client(settings),
            )
    except ScrapbookError as exc:
        print(f"error: {exc.kind}: {exc}", file=sys.stderr)
        return 1

    logger.info("=== Done → %s ===", output_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
