import streamlit as st
import time
from convrag.errors import ConvRagError
from convrag.rag.rag_pipeline import RAGPipeline
from convrag.storage.sqlite_store import SQLiteStore

st.set_page_config(
    page_title="Conversational RAG",
    layout="wide"
)


def initialize_session_state():
    if "sqlite_store" not in st.session_state:
        st.session_state.sqlite_store = SQLiteStore()

    if "rag_pipeline" not in st.session_state:
        st.session_state.rag_pipeline = RAGPipeline(store=st.session_state.sqlite_store)

    if "conversation" not in st.session_state:
        st.session_state.conversation = []


def build_latest_prompts(text):
    """One prompt per non-empty line, keyed by increasing epoch seconds."""
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    now = int(time.time())
    start = now - len(lines) + 1
    return {str(start + i): line for i, line in enumerate(lines)}


def render_ask_tab():
    st.subheader("Ask a knowledge base")

    col1, col2 = st.columns(2)
    with col1:
        service_id = st.number_input("Service ID", min_value=0, step=1, value=0,
                                     help="Leave at 0 to route by domain")
    with col2:
        domain_name = st.text_input("Domain", value="")

    prompts_text = st.text_area(
        "Latest prompts (one per line, oldest first)",
        height=150
    )
    debug = st.checkbox("Debug", value=False)

    if not st.button("Ask", type="primary"):
        return

    params = {"latest_prompts": build_latest_prompts(prompts_text), "debug": debug}
    if service_id:
        params["service_id"] = int(service_id)
    if domain_name.strip():
        params["domain_name"] = domain_name.strip()

    try:
        with st.spinner("Thinking..."):
            response = st.session_state.rag_pipeline.respond(params)
    except ConvRagError as e:
        st.error(f"{type(e).__name__}: {e}")
        return

    st.markdown("**Answer**")
    st.write(response.llm_response)
    with st.expander("Question summary"):
        st.write(response.question_summary)


def render_refine_tab():
    st.subheader("Refine a follow-up question")

    conversation = st.session_state.conversation
    if conversation:
        for turn in conversation:
            with st.chat_message("user"):
                st.write(turn["question"])
            if turn.get("answer"):
                with st.chat_message("assistant"):
                    st.write(turn["answer"])

    with st.expander("Add a previous exchange"):
        previous_question = st.text_input("Previous question", key="previous_question")
        previous_answer = st.text_area("Previous answer", key="previous_answer")
        if st.button("Add to history") and previous_question.strip():
            conversation.append({
                "epochTime": int(time.time()),
                "question": previous_question.strip(),
                "answer": previous_answer.strip() or None
            })
            st.rerun()

    question = st.text_input("Current question", key="current_question")
    col1, col2 = st.columns([1, 5])
    with col1:
        refine = st.button("Refine", type="primary")
    with col2:
        if st.button("Clear history"):
            st.session_state.conversation = []
            st.rerun()

    if not refine:
        return

    payload = {
        "conversationHistory": conversation,
        "currentQuestion": {"question": question, "answer": None}
    }
    try:
        with st.spinner("Checking context..."):
            result = st.session_state.rag_pipeline.refine_question(payload)
    except ConvRagError as e:
        st.error(f"{type(e).__name__}: {e}")
        return

    st.json(result.to_dict())


RECENT_AUDIT_RECORDS = 5


def render_sidebar():
    st.sidebar.title("Audit log")
    store = st.session_state.sqlite_store

    errors = store.get_error_records(limit=RECENT_AUDIT_RECORDS)
    st.sidebar.subheader(f"Recent errors ({len(errors)})")
    if not errors:
        st.sidebar.info("No errors recorded.")
    for record in reversed(errors):
        with st.sidebar.expander(f"{record['procedure_name']} @ {record['created_at'][:19]}"):
            st.write(record["error_message"])
            st.write(record["input_params"])

    st.sidebar.divider()

    debug_records = store.get_debug_records(limit=RECENT_AUDIT_RECORDS)
    st.sidebar.subheader(f"Recent debug runs ({len(debug_records)})")
    if not debug_records:
        st.sidebar.info("Enable Debug on a question to record a run.")
    for record in reversed(debug_records):
        with st.sidebar.expander(f"{record['elapsed_ms']} ms @ {record['created_at'][:19]}"):
            st.write(record["question_summary"])
            st.write(record["llm_response"])
            st.json(record["rag_results"] or [])


def main():
    initialize_session_state()
    render_sidebar()
    st.title("Conversational RAG")

    ask_tab, refine_tab = st.tabs(["Ask", "Refine question"])
    with ask_tab:
        render_ask_tab()
    with refine_tab:
        render_refine_tab()


if __name__ == "__main__":
    main()
