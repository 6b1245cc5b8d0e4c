"""Forum search service: MongoDB forums synchronized into an Elasticsearch index."""
