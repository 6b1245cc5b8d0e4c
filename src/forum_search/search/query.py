"""
Forum Query Construction and Result Assembly

Titles that start with the query text outrank fuzzy matches elsewhere:
a prefix-boosted title clause sits next to a fuzzy multi-field match.
"""

import logging
from typing import Any, Iterable

from forum_search.models import Forum, ForumResult

logger = logging.getLogger(__name__)

TITLE_BOOST = 2
PREFIX_BOOST = 3
HIGHLIGHT_PRE_TAG = "<mark>"
HIGHLIGHT_POST_TAG = "</mark>"


def build_search_body(query: str, size: int = 20) -> dict[str, Any]:
    """
    Build search request keyword arguments for a free-text query.

    Args:
        query: User-entered text
        size: Maximum number of hits

    Returns:
        dict with query, highlight and size keys
    """
    return {
        "query": {
            "bool": {
                "should": [
                    {
                        "multi_match": {
                            "query": query,
                            "fields": [f"title^{TITLE_BOOST}", "description"],
                            "fuzziness": "AUTO",
                        }
                    },
                    {
                        "match_phrase_prefix": {
                            "title": {"query": query, "boost": PREFIX_BOOST}
                        }
                    },
                ]
            }
        },
        "highlight": {
            "pre_tags": [HIGHLIGHT_PRE_TAG],
            "post_tags": [HIGHLIGHT_POST_TAG],
            "fields": {
                # whole title, one fragment of description
                "title": {"number_of_fragments": 0},
                "description": {"fragment_size": 150, "number_of_fragments": 1},
            },
        },
        "size": size,
    }


def hit_forum_ids(hits: Iterable[dict[str, Any]]) -> list[str]:
    """Collect the Mongo ids referenced by search hits, preserving order."""
    ids: list[str] = []
    for hit in hits:
        mongo_id = hit.get("_source", {}).get("mongoId")
        if mongo_id and mongo_id not in ids:
            ids.append(mongo_id)
    return ids


def _first_highlight(hit: dict[str, Any], field: str) -> str | None:
    fragments = hit.get("highlight", {}).get(field)
    if fragments:
        return fragments[0]
    return None


def merge_results(
    hits: list[dict[str, Any]], forums_by_id: dict[str, Forum]
) -> list[ForumResult]:
    """
    Merge index hits with live forum rows, keeping index order.

    The live forum is the base; the relevance score is overlaid and
    title/description are replaced by their highlighted text when present.
    Hits whose forum no longer exists keep Forum-derived fields as None.
    Only the best-ranked hit per forum is kept.
    """
    results: list[ForumResult] = []
    seen: set[str] = set()
    for hit in hits:
        mongo_id = hit.get("_source", {}).get("mongoId")
        if mongo_id:
            if mongo_id in seen:
                continue
            seen.add(mongo_id)
        forum = forums_by_id.get(mongo_id) if mongo_id else None

        base: dict[str, Any] = forum.model_dump() if forum else {}
        if forum is None:
            logger.warning(f"Search hit {hit.get('_id')} references missing forum {mongo_id}")

        title = _first_highlight(hit, "title")
        description = _first_highlight(hit, "description")
        base["title"] = title if title is not None else base.get("title")
        base["description"] = (
            description if description is not None else base.get("description")
        )
        base["score"] = hit.get("_score") or 0.0

        results.append(ForumResult(**base))
    return results
