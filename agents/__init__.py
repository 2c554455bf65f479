"""
Agents package for the Perplexity code search server.

This package groups together the Perplexity client and the request
handler behind the `search` tool.  Import `SearchHandler` directly from
here to simplify access:

```python
from agents import PerplexityClient, PerplexityConfig, SearchHandler

handler = SearchHandler(PerplexityClient(config=PerplexityConfig.from_env()))
```
"""

from .perplexity_client import PerplexityClient, PerplexityConfig  # noqa: F401
from .search_handler import SearchHandler  # noqa: F401

__all__ = ["PerplexityClient", "PerplexityConfig", "SearchHandler"]
