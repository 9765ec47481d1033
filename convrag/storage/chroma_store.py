import chromadb
from chromadb.config import Settings
from config.settings import CHROMA_DB_DIR


class ChromaStore:
    """Read access to the Chroma collections backing each search service.

    Every fully-qualified service name maps to one collection. Collections
    are built by the external indexing job; this store never creates them.
    """

    def __init__(self, path = CHROMA_DB_DIR, client = None):
        self.client = client or chromadb.PersistentClient(
            path=str(path),
            settings=Settings(anonymized_telemetry=False)
        )

    def get_collection(self, service_name):
        return self.client.get_collection(name=service_name)

    def search(self, service_name, query_embedding, top_k = 5):
        collection = self.get_collection(service_name)
        results = collection.query(
            query_embeddings=[query_embedding],
            n_results=top_k,
            include=["documents", "metadatas", "distances"]
        )

        # Format results
        formatted_results = []
        if results["ids"] and len(results["ids"][0]) > 0:
            documents = results.get("documents") or [[]]
            metadatas = results.get("metadatas") or [[]]
            for i in range(len(results["ids"][0])):
                formatted_results.append({
                    "id": results["ids"][0][i],
                    "document": documents[0][i] if documents[0] else None,
                    "distance": results["distances"][0][i],
                    "similarity": 1 - results["distances"][0][i],
                    "metadata": (metadatas[0][i] if metadatas[0] else None) or {}
                })

        return formatted_results
