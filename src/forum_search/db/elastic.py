"""Elasticsearch client factory."""

from elasticsearch import AsyncElasticsearch

from forum_search.core.infrastructure_config import InfrastructureSettings, settings


def create_elasticsearch_client(
    config: InfrastructureSettings = settings,
) -> AsyncElasticsearch:
    """
    Build the async client from environment-provided credentials.

    Elastic Cloud (ELASTIC_CLOUD_ID) takes precedence over ELASTICSEARCH_URL.
    API key auth takes precedence over username/password.
    """
    auth: dict = {}
    if config.ELASTIC_API_KEY:
        auth["api_key"] = config.ELASTIC_API_KEY
    elif config.ELASTIC_USERNAME and config.ELASTIC_PASSWORD:
        auth["basic_auth"] = (config.ELASTIC_USERNAME, config.ELASTIC_PASSWORD)

    if config.ELASTIC_CLOUD_ID:
        return AsyncElasticsearch(cloud_id=config.ELASTIC_CLOUD_ID, **auth)
    if not config.ELASTICSEARCH_URL:
        raise RuntimeError("ELASTICSEARCH_URL or ELASTIC_CLOUD_ID must be set")
    return AsyncElasticsearch(config.ELASTICSEARCH_URL, **auth)
