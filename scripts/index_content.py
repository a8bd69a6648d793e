#!/usr/bin/env python
"""Index every category, post and comment into the vector store.

Usage:
    python -m scripts.index_content --create-tables

Run once after deploying, or whenever the index needs rebuilding. Rows are
upserted by id, so running it again is safe.
"""

import argparse
import asyncio
import sys
from pathlib import Path

from forum_search.config import get_settings
from forum_search.container import ServiceContainer
from forum_search.exceptions import IndexingError
from forum_search.indexing.job import IndexingReport, run_indexing
from forum_search.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def print_report(report: IndexingReport) -> None:
    """Print per-type indexing counts."""
    print("\n" + "=" * 60)
    print("INDEXING SUMMARY")
    print("=" * 60)
    for name, counts in (
        ("Categories", report.categories),
        ("Posts", report.posts),
        ("Comments", report.comments),
    ):
        print(
            f"{name}: {counts.indexed} indexed, "
            f"{counts.skipped} skipped, {counts.failed} failed"
        )
    print("=" * 60)


async def index_content(create_tables: bool, output_path: Path | None = None) -> bool:
    """Run the indexing job and return whether it completed.

    Args:
        create_tables: Create the relational schema before indexing.
        output_path: Optional path to save the report JSON.

    Returns:
        True if collections were bootstrapped and every row was processed.
    """
    settings = get_settings()
    setup_logging(level=settings.log_level)

    container = ServiceContainer.from_settings(settings)
    try:
        if create_tables and container.database is not None:
            logger.info("Creating database tables")
            await container.database.create_all()

        try:
            report = await run_indexing(
                container.store_repository,
                container.bootstrapper,
                container.indexer,
            )
        except IndexingError as e:
            logger.error(f"Indexing aborted: {e.message}", extra={"details": e.details})
            print(f"\nERROR: {e.message}")
            return False

        print_report(report)

        if output_path:
            output_path.write_text(report.model_dump_json(indent=2))
            logger.info(f"Report saved to {output_path}")
    finally:
        await container.close()

    return True


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Index forum content into the vector store",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create database tables before indexing",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Path to save the report JSON",
    )

    args = parser.parse_args()

    completed = asyncio.run(
        index_content(
            create_tables=args.create_tables,
            output_path=args.output,
        )
    )

    sys.exit(0 if completed else 1)


if __name__ == "__main__":
    main()
