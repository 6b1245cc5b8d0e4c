#!/usr/bin/env python3
"""
Create (or rebuild) the forum search index and load every forum into it.

Usage:
    python scripts/setup_index.py
    python scripts/setup_index.py --delete-existing

Reads MONGODB_URI, ELASTIC_CLOUD_ID / ELASTICSEARCH_URL, ELASTIC_API_KEY
and FORUM_INDEX from the environment.
"""

import argparse
import asyncio
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from forum_search.core.config import settings
from forum_search.search import ForumSearchError
from forum_search.services.search import build_search_service


async def run(delete_existing: bool) -> int:
    service = build_search_service(settings)
    try:
        print(f"Index: {service.index_name} (delete existing: {delete_existing})")
        await service.setup_index(delete_existing=delete_existing)
        status = await service.index_status()
        print(
            f"Done: {status['documents']} documents indexed "
            f"for {status['forums']} forums."
        )
        return 0
    except ForumSearchError as e:
        print(f"Index setup failed: {e}", file=sys.stderr)
        return 1
    finally:
        await service.close()


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument(
        "--delete-existing",
        action="store_true",
        help="Drop the index first and rebuild it from MongoDB",
    )
    args = parser.parse_args()
    sys.exit(asyncio.run(run(args.delete_existing)))


if __name__ == "__main__":
    main()
