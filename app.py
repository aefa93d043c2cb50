"""Web interface using Streamlit."""

import sqlite3
import tempfile
import uuid
from pathlib import Path

import streamlit as st

from supportbot import AssistantService, DocumentLoader, SessionAccumulator, get_stores
from supportbot.config import config
from supportbot.document_processing import MAX_BATCH_FILES
from supportbot.models import FAQ, Sender

MAX_PREVIEW_LENGTH = 200

config.setup_logging()
logger = config.get_logger(__name__)


class SessionState:
    """Centralized session state management."""

    @staticmethod
    def initialize() -> None:
        """Initialize all session state variables."""
        defaults = {
            "accumulator": None,
            "knowledge_store": None,
            "chat_store": None,
            "session_id": f"chat-{uuid.uuid4().hex[:12]}",
        }

        for key, default_value in defaults.items():
            if key not in st.session_state:
                st.session_state[key] = default_value

    @staticmethod
    def new_conversation() -> None:
        """Start a fresh chat session id."""
        st.session_state.session_id = f"chat-{uuid.uuid4().hex[:12]}"

    @staticmethod
    def is_system_ready() -> bool:
        """Check if the system is properly initialized.

        Returns:
            bool: True if the session accumulator is initialized.
        """
        return st.session_state.get("accumulator") is not None


def initialize_system() -> bool:
    """Open the stores and wire the assistant pipeline.

    Returns:
        bool: True if initialization succeeds, False otherwise.
    """
    try:
        config.validate()
        knowledge_store, chat_store = get_stores()
        st.session_state.knowledge_store = knowledge_store
        st.session_state.chat_store = chat_store
        st.session_state.accumulator = SessionAccumulator(
            AssistantService.from_config(),
            knowledge_store,
            chat_store,
            history_window=config.CHAT_HISTORY_WINDOW,
        )
        logger.info("Support assistant initialized")
    except (ValueError, OSError, sqlite3.Error) as e:
        logger.exception("Failed to initialize system")
        st.error(f"Failed to initialize system: {e}")
        return False
    else:
        return True


def render_sidebar() -> str:
    """Render navigation and provider status.

    Returns:
        str: Selected page name.
    """
    with st.sidebar:
        st.header("Support Assistant")
        page = st.radio("Page", ["Chat", "Admin"], label_visibility="collapsed")

        st.divider()
        st.subheader("Provider")
        health = st.session_state.accumulator.assistant.dispatcher.check_health()
        st.write(f"**{health['provider']}** ({health['model']})")
        if health["status"]:
            st.success(health["message"])
        else:
            st.info(f"{health['message']} - answering from the local knowledge base")

        st.divider()
        if st.button("New Conversation", use_container_width=True):
            SessionState.new_conversation()
            st.rerun()
    return page


def render_chat() -> None:
    """Render the chat page for the current session."""
    accumulator: SessionAccumulator = st.session_state.accumulator
    session = accumulator.history(st.session_state.session_id)

    st.header("Chat with Support")
    for message in session.messages:
        role = "user" if message.sender is Sender.USER else "assistant"
        with st.chat_message(role):
            st.write(message.content)
            if message.sender is Sender.AI:
                st.caption(f"{message.provider} - {message.tokens_used} tokens")

    prompt = st.chat_input("How can we help you today?")
    if not prompt or not prompt.strip():
        return

    with st.spinner("Thinking..."):
        try:
            accumulator.send_message(st.session_state.session_id, prompt)
        except (ValueError, OSError, sqlite3.Error) as e:
            logger.exception("Message processing failed")
            st.error(f"Failed to process message: {e}")
            return
    st.rerun()


def render_stats() -> None:
    """Render dashboard counters and recent sessions."""
    stats = st.session_state.chat_store.dashboard_stats()
    cols = st.columns(5)
    for col, (label, value) in zip(
        cols,
        [
            ("Total Chats", stats.total_chats),
            ("Active Chats", stats.active_chats),
            ("Today", stats.today_chats),
            ("Active FAQs", stats.total_faqs),
            ("Active Documents", stats.total_documents),
        ],
        strict=True,
    ):
        col.metric(label, value)

    if stats.recent_activity:
        st.subheader("Recent Activity")
        st.table(stats.recent_activity)


def render_faq_admin() -> None:
    """Render FAQ creation and management."""
    store = st.session_state.knowledge_store

    with st.form("new_faq", clear_on_submit=True):
        st.subheader("Add FAQ")
        question = st.text_input("Question")
        answer = st.text_area("Answer")
        category = st.text_input("Category")
        tags = st.text_input("Tags (comma separated)")
        priority = st.slider("Priority", 0, 10, 0)
        if st.form_submit_button("Save FAQ"):
            try:
                store.add_faq(
                    FAQ(
                        question=question,
                        answer=answer,
                        category=category or None,
                        tags=tags,  # type: ignore[arg-type]
                        priority=priority,
                    )
                )
                st.success("FAQ saved")
            except ValueError as e:
                st.error(str(e))

    search = st.text_input("Search FAQs")
    for faq in store.list_faqs(search=search or None).items:
        with st.expander(f"[{faq.priority}] {faq.question}"):
            st.write(faq.answer)
            st.caption(f"Category: {faq.category or '-'} | Tags: {', '.join(faq.tags)}")
            col1, col2 = st.columns(2)
            label = "Deactivate" if faq.active else "Activate"
            if col1.button(label, key=f"toggle_faq_{faq.id}"):
                store.update_faq(faq.id, active=not faq.active)
                st.rerun()
            if col2.button("Delete", key=f"delete_faq_{faq.id}"):
                store.delete_faq(faq.id)
                st.rerun()


def process_uploads(uploaded_files, category: str, tags: str) -> None:  # noqa: ANN001
    """Save uploaded files as knowledge-base documents, one per file."""
    if len(uploaded_files) > MAX_BATCH_FILES:
        st.error(f"Please upload at most {MAX_BATCH_FILES} files at once")
        return

    with tempfile.TemporaryDirectory() as tmp_dir:
        paths = []
        for index, uploaded_file in enumerate(uploaded_files):
            tmp_path = Path(tmp_dir) / str(index) / Path(uploaded_file.name).name
            tmp_path.parent.mkdir()
            tmp_path.write_bytes(uploaded_file.getbuffer())
            paths.append(tmp_path)
        result = DocumentLoader.upload_batch(
            paths,
            st.session_state.knowledge_store,
            category=category or None,
            tags=tags,
            max_size=config.MAX_FILE_SIZE,
        )

    if result.uploaded:
        st.success(f"{len(result.uploaded)} files uploaded successfully")
    for error in result.errors:
        st.error(f"{error['filename']}: {error['error']}")


def render_document_admin() -> None:
    """Render document upload and management."""
    store = st.session_state.knowledge_store

    st.subheader("Upload Documents")
    uploaded_files = st.file_uploader(
        f"Upload up to {MAX_BATCH_FILES} knowledge-base documents",
        type=["pdf", "txt", "md", "doc", "docx"],
        accept_multiple_files=True,
    )
    category = st.text_input("Document category")
    tags = st.text_input("Document tags (comma separated)")
    if uploaded_files and st.button("Upload", use_container_width=True):
        process_uploads(uploaded_files, category, tags)

    for document in store.list_documents().items:
        with st.expander(f"{document.name} ({document.type}, {document.size} bytes)"):
            st.caption(
                f"Category: {document.category or '-'} | "
                f"Accessed {document.access_count} times"
            )
            if st.checkbox("Show content", key=f"show_doc_{document.id}"):
                full = store.get_document(document.id)
                content = full.content if full else ""
                st.code(
                    content[:MAX_PREVIEW_LENGTH] + "..."
                    if len(content) > MAX_PREVIEW_LENGTH
                    else content
                )
            col1, col2 = st.columns(2)
            label = "Deactivate" if document.active else "Activate"
            if col1.button(label, key=f"toggle_doc_{document.id}"):
                store.update_document(document.id, active=not document.active)
                st.rerun()
            if col2.button("Delete", key=f"delete_doc_{document.id}"):
                store.delete_document(document.id)
                st.rerun()


def render_admin() -> None:
    """Render the admin page."""
    st.header("Knowledge Base Administration")
    render_stats()
    faq_tab, doc_tab = st.tabs(["FAQs", "Documents"])
    with faq_tab:
        render_faq_admin()
    with doc_tab:
        render_document_admin()


def main() -> None:
    """Main entry point for the Streamlit web application."""
    st.set_page_config(page_title="SupportBot", layout="wide")

    SessionState.initialize()
    st.title("SupportBot - Customer Support Assistant")

    if not SessionState.is_system_ready() and not initialize_system():
        return

    page = render_sidebar()
    if page == "Admin":
        render_admin()
    else:
        render_chat()


if __name__ == "__main__":
    main()
