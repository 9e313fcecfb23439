import streamlit as st
import tempfile
import os
from dataclasses import replace
from docsum.config import SummarizerConfig, load_service_config
from docsum.errors import SummarizerError
from docsum.llm import build_port
from docsum.logging import configure_logging
from docsum.pipeline import summarize_document

configure_logging()
defaults = SummarizerConfig.from_env()

st.set_page_config(page_title="Document Summarizer", layout="wide")

st.title("📄 Document Summarizer")
st.caption("Map-reduce summarization of long text and PDF documents.")

with st.sidebar:
    st.header("⚙️ Settings")
    chunk_size = st.number_input("Window size (characters)", 1000, 50000, defaults.window_size, 500)
    overlap = st.number_input("Overlap", 0, 10000, defaults.overlap_size, 250)
    workers = st.number_input("Parallel workers (0 = one per chunk)", 0, 64, defaults.max_workers or 0, 1)
    system_instruction = st.text_area("System instruction", value=defaults.system_instruction)
    sequential = st.checkbox("Carry context between chunks (sequential)")
    model = st.text_input("OpenAI model", value=os.getenv("OPENAI_MODEL", "gpt-4o-mini"))
    if model:
        os.environ["OPENAI_MODEL"] = model

uploaded = st.file_uploader("Upload a document", type=["pdf", "txt", "md"])

if uploaded:
    suffix = os.path.splitext(uploaded.name)[1] or ".txt"
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as tmp:
        tmp.write(uploaded.read())
        tmp_path = tmp.name

    run = st.button("Summarize")
    if run:
        config = replace(
            defaults,
            window_size=int(chunk_size),
            overlap_size=int(overlap),
            max_workers=int(workers) or None,
            carry_context=sequential,
            system_instruction=system_instruction or defaults.system_instruction,
        )
        try:
            with st.spinner("Processing document..."):
                result = summarize_document(build_port(load_service_config()), tmp_path, config)
        except SummarizerError as e:
            st.error(str(e))
        else:
            st.success(f"Done in {result.elapsed_sec:.1f}s")
            st.subheader("Final summary")
            st.write(result.final_summary)
            with st.expander("Partial summaries"):
                st.write(f"Chunks: {result.chunks} ({result.mode})")
                for i, ps in enumerate(result.partial_summaries, 1):
                    st.markdown(f"**Chunk {i}:** {ps}")
        finally:
            os.unlink(tmp_path)
else:
    st.info("Upload a document to start.")
