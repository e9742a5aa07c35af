"""
Load a JSON or CSV file of candidates and upsert it into the main pool.

    python scripts/ingest_batch.py candidates.csv --source "LinkedIn Export"
"""
import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd

from recruitops.helpers.constants import SOURCE_JSON_IMPORT
from recruitops.utils.logging_config import configure_for_environment, get_logger

logger = get_logger("scripts.ingest_batch")


def load_records(path: str) -> List[Dict[str, Any]]:
    """Read ``path`` into plain dicts; empty cells become ``None``."""
    suffix = Path(path).suffix.lower()
    if suffix == ".csv":
        df = pd.read_csv(path, dtype=str)
    elif suffix in (".json", ".jsonl"):
        df = pd.read_json(path, lines=suffix == ".jsonl", dtype=False)
    else:
        raise ValueError(f"Unsupported file type {suffix}; expected .csv, .json or .jsonl")

    df = df.astype(object).where(pd.notna(df), None)
    df.columns = [str(c).strip().lower().replace(" ", "_") for c in df.columns]
    return df.to_dict(orient="records")


async def run(path: str, source: str) -> Dict[str, Any]:
    from recruitops.services.ingestion import ingest_records

    records = load_records(path)
    logger.info(f"Loaded {len(records)} records from {path}")
    return await ingest_records(records, default_source=source)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("path", help="JSON, JSONL or CSV file of candidates")
    parser.add_argument("--source", default=SOURCE_JSON_IMPORT, help="Provenance tag for records without one")
    args = parser.parse_args(argv)

    configure_for_environment(log_name="ingest_batch")
    result = asyncio.run(run(args.path, args.source))
    for err in result["errors"]:
        logger.warning(f"Record {err['index']} rejected: {err['error']}")
    logger.info(f"Upserted {result['count']} candidates")
    return 0 if result["count"] else 1


if __name__ == "__main__":
    sys.exit(main())
