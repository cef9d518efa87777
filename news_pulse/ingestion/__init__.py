from news_pulse.ingestion.base_connector import BaseConnector, ProviderClient
from news_pulse.ingestion.content_enricher import ContentEnricher
from news_pulse.ingestion.feed_search_connector import FeedSearchConnector
from news_pulse.ingestion.semantic_search_connector import SemanticSearchConnector

__all__ = [
    "BaseConnector",
    "ProviderClient",
    "ContentEnricher",
    "FeedSearchConnector",
    "SemanticSearchConnector",
]
