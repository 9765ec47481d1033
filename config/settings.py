import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# Base paths
BASE_DIR = Path(__file__).parent.parent
DATA_DIR = BASE_DIR / "data"
CHROMA_DB_DIR = DATA_DIR / "chroma_db"
SQLITE_DB_PATH = DATA_DIR / "metadata.db"

# Create directories if they don't exist
DATA_DIR.mkdir(parents=True, exist_ok=True)
CHROMA_DB_DIR.mkdir(parents=True, exist_ok=True)

# OpenAI Configuration
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
EMBEDDING_MODEL = "text-embedding-3-small"
LLM_MODEL = "gpt-4o-mini"
LLM_MAX_ATTEMPTS = 3

# Model used for every completion in both pipelines
COMPLETION_MODEL = os.getenv("COMPLETION_MODEL", LLM_MODEL)

# Search Configuration
SEARCH_COLUMNS = ("transcript_text", "region")
SEARCH_TEXT_COLUMN = "transcript_text"   # Filled from the stored document when absent from metadata
SEARCH_RESULT_LIMIT = 3
RERANK_CANDIDATES = 15                   # Hits pulled from Chroma before re-ranking

# Cross-Encoder Configuration
CROSS_ENCODER_MODEL = "cross-encoder/ms-marco-MiniLM-L-6-v2"
USE_RERANKING = os.getenv("USE_RERANKING", "true").lower() == "true"

# Conversation Configuration
MAX_HISTORY_TO_CHECK = 5
MAX_LATEST_PROMPTS = 20

# Service Registry Configuration
DEFAULT_DOMAIN = "default"

# SQLite Configuration
SQLITE_DB_PATH = str(SQLITE_DB_PATH)
