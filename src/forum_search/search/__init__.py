"""Forum search index: lifecycle, sync and query construction."""

from forum_search.search.errors import (
    ForumSearchError,
    IndexSetupError,
    SearchError,
    SearchUnavailableError,
    SyncError,
)
from forum_search.search.index_manager import ForumIndexManager
from forum_search.search.query import build_search_body, merge_results
from forum_search.search.sync import ForumIndexSync

__all__ = [
    "ForumSearchError",
    "IndexSetupError",
    "SearchError",
    "SearchUnavailableError",
    "SyncError",
    "ForumIndexManager",
    "ForumIndexSync",
    "build_search_body",
    "merge_results",
]
