CONTEXT_CHECK_SYSTEM_PROMPT = (
    "You are a helpful assistant. Answer \"Yes\" if the user's question "
    "is self-contained and clear, or \"No\" if it requires additional context."
)

CONTEXT_CHECK_TEMPLATE = """Question: "{question}"

Answer:"""

RELEVANCE_CHECK_SYSTEM_PROMPT = (
    "Determine if the previous exchange is relevant to understanding "
    "the current question. Answer \"Yes\" or \"No\"."
)

RELEVANCE_CHECK_TEMPLATE = """Current Question: "{question}"
Previous Question: "{previous_question}"
Previous Answer: "{previous_answer}"

Answer:"""

REFINE_QUESTION_SYSTEM_PROMPT = (
    "Using the previous exchange and the current question, generate a clear, "
    "self-contained question that includes necessary context. "
    "Do not include any additional text or explanations."
)

REFINE_QUESTION_TEMPLATE = """Previous Question: "{previous_question}"
Previous Answer: "{previous_answer}"
Current Question: "{question}"

Refined Question:"""

NO_CONTEXT_MESSAGE = "Please provide more context in your question."

SUMMARIZE_SYSTEM_PROMPT = (
    "You are a helpful AI assistant specializing in summarizing questions."
)

SUMMARIZE_TEMPLATE = (
    "Summarize the following questions, focusing on the context relevant to "
    "the last question. Emphasize the content of the last question in your "
    "summary:\n\n{questions}"
)

RAG_SYSTEM_PROMPT = (
    "You are a helpful AI assistant. Use the provided context and search "
    "results to answer the user's question."
)

RAG_ANSWER_TEMPLATE = """
Context: {context}

RAG Search Results:
{results}

User Question: {question}

Please provide a helpful response based on the context, RAG search results, and the user's question."""
