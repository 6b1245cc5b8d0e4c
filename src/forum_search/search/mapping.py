"""Forum index settings and mappings."""

ANALYZER_NAME = "forum_analyzer"

# standard tokenizer -> lowercase -> stopwords -> stemming
FORUM_INDEX_SETTINGS = {
    "number_of_shards": 1,
    "number_of_replicas": 1,
    "analysis": {
        "analyzer": {
            ANALYZER_NAME: {
                "type": "custom",
                "tokenizer": "standard",
                "filter": ["lowercase", "stop", "porter_stem"],
            }
        }
    },
}

FORUM_INDEX_MAPPINGS = {
    "properties": {
        # Foreign key back to the Mongo forum row
        "mongoId": {"type": "keyword"},
        "title": {
            "type": "text",
            "analyzer": ANALYZER_NAME,
            "fields": {"keyword": {"type": "keyword", "ignore_above": 256}},
        },
        "description": {"type": "text", "analyzer": ANALYZER_NAME},
        "posts": {"type": "integer"},
        "replies": {"type": "integer"},
        "lastActive": {"type": "date"},
        "image": {"type": "keyword", "index": False},
        "createdAt": {"type": "date"},
        "updatedAt": {"type": "date"},
    }
}
