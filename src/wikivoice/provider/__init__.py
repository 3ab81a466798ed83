from wikivoice.provider.base import SearchProvider
from wikivoice.provider.wikipedia import WikipediaProvider

__all__ = [
    "SearchProvider",
    "WikipediaProvider",
]
