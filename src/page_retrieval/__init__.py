"""Page retrieval service.

Retrieves remote pages through one of several strategies (plain HTTP fetch,
metadata-only probe, raw byte fetch, or headless-browser rendering) and
normalizes every outcome into a uniform response envelope.

Entry point::

    from page_retrieval.retrieval import RetrievalRequest, open_page_retriever

    async with open_page_retriever() as retriever:
        envelope = await retriever.retrieve(RetrievalRequest("https://example.com"))
"""

__version__ = "0.1.0"
