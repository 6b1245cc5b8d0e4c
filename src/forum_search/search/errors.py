"""Errors raised by the forum search subsystem."""


class ForumSearchError(Exception):
    """Base class for forum search failures."""


class SearchUnavailableError(ForumSearchError):
    """The search engine could not be reached."""


class IndexSetupError(ForumSearchError):
    """Creating, deleting or populating the forum index failed."""


class SyncError(ForumSearchError):
    """Writing forum documents to the index failed."""


class SearchError(ForumSearchError):
    """Query execution failed."""
