from config.settings import (
    CROSS_ENCODER_MODEL,
    RERANK_CANDIDATES,
    SEARCH_TEXT_COLUMN,
    USE_RERANKING
)
from convrag.errors import RetrievalError
from convrag.logger import get_logger

logger = get_logger(__name__)


class SearchClient:
    """Search gateway: query a named search service and return ranked records."""

    def __init__(self, embedding_generator = None, chroma_store = None,
                 use_reranking = USE_RERANKING, reranker = None,
                 text_column = SEARCH_TEXT_COLUMN):
        if embedding_generator is None:
            from convrag.storage.embeddings import EmbeddingGenerator
            embedding_generator = EmbeddingGenerator()
        if chroma_store is None:
            from convrag.storage.chroma_store import ChromaStore
            chroma_store = ChromaStore()
        self.embedding_generator = embedding_generator
        self.chroma_store = chroma_store
        self.use_reranking = use_reranking
        self.model = reranker
        self.text_column = text_column

    def _get_reranker(self):
        if self.model is None:
            from sentence_transformers import CrossEncoder
            self.model = CrossEncoder(CROSS_ENCODER_MODEL)
        return self.model

    def rerank(self, query, hits, top_k = 3):
        """
        Re-rank hits using cross-encoder.
        """
        if not hits:
            return []

        pairs = [(query, hit.get('document') or '') for hit in hits]

        scores = self._get_reranker().predict(pairs)

        for hit, score in zip(hits, scores):
            hit['rerank_score'] = float(score)

        reranked = sorted(
            hits,
            key=lambda x: x.get('rerank_score', 0.0),
            reverse=True
        )

        return reranked[:top_k]

    def _project(self, hit, columns):
        metadata = hit.get("metadata") or {}
        record = {}
        for column in columns:
            value = metadata.get(column)
            if value is None and column == self.text_column:
                value = hit.get("document")
            record[column] = value
        return record

    def search(self, service_name, query, columns, limit):
        """
        Return at most `limit` records projected to `columns`, best first.
        """
        candidates = max(limit, RERANK_CANDIDATES) if self.use_reranking else limit

        try:
            query_embedding = self.embedding_generator.generate_embedding(query)
            hits = self.chroma_store.search(service_name, query_embedding, top_k=candidates)
        except Exception as e:
            raise RetrievalError(f"Failed to perform RAG search on {service_name}: {e}") from e

        if hits is None:
            raise RetrievalError(f"Search service {service_name} returned no result")

        if self.use_reranking:
            try:
                hits = self.rerank(query, hits, top_k=limit)
            except Exception as e:
                raise RetrievalError(f"Failed to re-rank results from {service_name}: {e}") from e
        else:
            hits = hits[:limit]

        logger.debug("Search on %s returned %d hits", service_name, len(hits))
        return [self._project(hit, columns) for hit in hits]
