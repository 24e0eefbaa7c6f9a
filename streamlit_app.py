import datetime
import tempfile
from pathlib import Path

import streamlit as st

from draftvista.config import Config
from draftvista.errors import DraftVistaError
from draftvista.llm.base import LLMClient
from draftvista.logging_config import setup_logging
from draftvista.pipeline import AnalysisPipeline
from draftvista.schemas import AnalysisResponse, AnalysisType
from draftvista.services.journals import is_valid_url
from draftvista.services.uploads import managed_upload


@st.cache_resource
def get_pipeline() -> AnalysisPipeline:
    # One oracle client per Streamlit process; a missing API key surfaces here
    cfg = Config.from_env()
    setup_logging(cfg.log_level)
    return AnalysisPipeline(LLMClient(model_name=cfg.model_name), config=cfg)


def run_pipeline(file_bytes: bytes, filename: str, journal_url: str, analysis_type: AnalysisType,
                 reviewer_comments: str = None) -> AnalysisResponse:
    pipeline = get_pipeline()
    with tempfile.NamedTemporaryFile(suffix=Path(filename).suffix, delete=False) as tf:
        tf.write(file_bytes)
        temp_path = tf.name
    with managed_upload(temp_path):
        with st.spinner("Extracting text, reading the journal page and waiting for the AI review..."):
            return pipeline.run(temp_path, journal_url, analysis_type, filename=filename,
                                size=len(file_bytes), reviewer_comments=reviewer_comments)


def render_result(result: AnalysisResponse):
    analysis = result.analysis
    st.subheader(f"Review for {result.manuscript.filename}")
    st.caption(f"Target journal: {result.journal.name} ({result.journal.url})  •  "
               f"{result.analysis_type.value}  •  {analysis.timestamp:%Y-%m-%d %H:%M} UTC")
    if analysis.is_mock:
        st.warning("The AI service could not be reached. The review below is a placeholder.")

    for section in analysis.sections:
        st.markdown(f"### {section.title}")
        if section.content:
            st.markdown(section.content)
        for sub in section.subsections:
            with st.expander(sub.title, expanded=True):
                st.markdown(sub.content or "_No content_")

    ts = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    st.download_button("Download analysis.json", data=result.model_dump_json(indent=2, by_alias=True),
                       file_name=f"analysis_{ts}.json", mime="application/json")


st.set_page_config(page_title="DraftVista", layout="wide")
st.title("DraftVista")
st.caption("Upload a manuscript and the target journal's homepage to get a structured AI review.")

mode = st.radio("Analysis type", ["Pre-submission review", "Post-rejection help"], horizontal=True)
analysis_type = AnalysisType.PRE_SUBMISSION if mode.startswith("Pre") else AnalysisType.POST_REJECTION

col1, col2 = st.columns([2, 1])
with col1:
    uploaded = st.file_uploader("Upload your manuscript", type=["pdf", "docx", "doc"])
with col2:
    journal_url = st.text_input("Journal URL", placeholder="https://www.nature.com/nature")

reviewer_comments = None
if analysis_type == AnalysisType.POST_REJECTION:
    reviewer_comments = st.text_area("Reviewer comments", height=200)

if st.button("Analyze", disabled=uploaded is None):
    if not is_valid_url(journal_url.strip()):
        st.error("Please enter a valid http(s) journal URL.")
    elif analysis_type == AnalysisType.POST_REJECTION and not (reviewer_comments or "").strip():
        st.error("Reviewer comments are required for post-rejection analysis.")
    else:
        try:
            st.session_state["last_result"] = run_pipeline(
                uploaded.getvalue(), uploaded.name, journal_url.strip(), analysis_type, reviewer_comments)
        except DraftVistaError as e:
            st.error(str(e))

if "last_result" in st.session_state:
    render_result(st.session_state["last_result"])
