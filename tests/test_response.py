from draftvista.parsing.response import (
    MOCK_RESPONSE,
    POST_REJECTION_MOCK_NOTE,
    build_mock_response,
    parse_llm_response,
)
from draftvista.schemas import AnalysisType


def _shape(result):
    return [
        {
            "title": s.title,
            "content": s.content,
            "subsections": [{"title": sub.title, "content": sub.content} for sub in s.subsections],
        }
        for s in result.sections
    ]


def test_sections_and_subsections():
    result = parse_llm_response("## A\ncontent a\n### B\ncontent b\n## C\ncontent c\n", AnalysisType.PRE_SUBMISSION)
    assert _shape(result) == [
        {"title": "A", "content": "content a\n", "subsections": [{"title": "B", "content": "content b\n"}]},
        {"title": "C", "content": "content c\n", "subsections": []},
    ]
    assert result.analysis_type == AnalysisType.PRE_SUBMISSION
    assert result.is_mock is False
    assert result.timestamp is not None


def test_empty_input_falls_back_to_single_section():
    result = parse_llm_response("", AnalysisType.POST_REJECTION)
    assert len(result.sections) == 1
    assert result.sections[0].title == "Analysis Results"
    assert result.sections[0].content == ""
    assert result.sections[0].subsections == []
    assert result.analysis_type == AnalysisType.POST_REJECTION


def test_text_before_first_heading_is_kept(review_markdown):
    result = parse_llm_response(review_markdown, AnalysisType.PRE_SUBMISSION)
    titles = [s.title for s in result.sections]
    assert titles == ["Full Response", "Executive Summary", "Detailed Section Assessment", "Overall Recommendations"]
    assert result.sections[0].content == "# AI-Generated Manuscript Review Report\n"
    detailed = result.sections[2]
    assert detailed.content == ""
    assert [sub.title for sub in detailed.subsections] == ["1. Title and Abstract", "2. Introduction"]
    assert detailed.subsections[1].content == "- **Assessment**: Gap is well motivated.\n"


def test_blank_lines_are_dropped_and_lines_stripped():
    result = parse_llm_response("## Summary\n\n   first line   \n\n\nsecond line\n", AnalysisType.PRE_SUBMISSION)
    assert result.sections[0].content == "first line\nsecond line\n"


def test_subsection_under_empty_section_is_not_lost():
    result = parse_llm_response("## A\n### B\nbody\n## C\nmore\n", AnalysisType.PRE_SUBMISSION)
    assert _shape(result)[0] == {"title": "A", "content": "", "subsections": [{"title": "B", "content": "body\n"}]}


def test_empty_sections_are_skipped_but_duplicates_are_kept():
    text = "## Empty\n## Notes\none\n## Notes\ntwo\n"
    result = parse_llm_response(text, AnalysisType.PRE_SUBMISSION)
    assert [(s.title, s.content) for s in result.sections] == [("Notes", "one\n"), ("Notes", "two\n")]


def test_headings_need_a_space_and_deeper_levels_are_content():
    result = parse_llm_response("##Tight\n## Real\n#### deep\n", AnalysisType.PRE_SUBMISSION)
    assert [s.title for s in result.sections] == ["Full Response", "Real"]
    assert result.sections[0].content == "##Tight\n"
    assert result.sections[1].content == "#### deep\n"


def test_mock_response_pre_submission():
    result = build_mock_response(AnalysisType.PRE_SUBMISSION)
    assert result.is_mock is True
    assert len(result.sections) == 1
    assert result.sections[0].title == "API Service Unavailable"
    assert result.sections[0].content == MOCK_RESPONSE


def test_mock_response_post_rejection_adds_note():
    result = build_mock_response(AnalysisType.POST_REJECTION)
    assert result.sections[0].content == MOCK_RESPONSE + POST_REJECTION_MOCK_NOTE
    assert result.analysis_type == AnalysisType.POST_REJECTION


def test_serialises_with_camel_case_keys():
    data = build_mock_response(AnalysisType.PRE_SUBMISSION).model_dump(mode="json", by_alias=True)
    assert data["isMock"] is True
    assert data["analysisType"] == "pre-submission"
    assert data["sections"][0]["subsections"] == []
