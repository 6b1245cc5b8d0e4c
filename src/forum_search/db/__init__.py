from forum_search.db.elastic import create_elasticsearch_client
from forum_search.db.mongo import FORUM_COLLECTION, MongoDB

__all__ = ["create_elasticsearch_client", "FORUM_COLLECTION", "MongoDB"]
