"""
Enrich every uploaded candidate that has stored résumé text.

    python scripts/backfill_enrichment.py [--llm | --no-llm]
"""
import argparse
import asyncio
import sys

from recruitops.utils.logging_config import configure_for_environment, get_logger

logger = get_logger("scripts.backfill_enrichment")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--llm", dest="use_llm", action="store_true", default=None,
                        help="Ask the local LLM first (default: ENRICH_WITH_LLM)")
    parser.add_argument("--no-llm", dest="use_llm", action="store_false")
    args = parser.parse_args(argv)

    configure_for_environment(log_name="backfill_enrichment")
    from recruitops.services.enrichment import backfill_enrichment

    result = asyncio.run(backfill_enrichment(use_llm=args.use_llm))
    logger.info(
        f"Backfill complete: {result['updated']} updated, {result['skipped']} unchanged "
        f"of {result['processed']}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
