from typing import List, Optional

from ..schemas import AnalysisResult, AnalysisSection, AnalysisSubsection, AnalysisType

MOCK_RESPONSE = """
# AI-Generated Manuscript Review Report

## Executive Summary
This is a placeholder response as the AI service is currently unavailable. Please check your internet connection and try again later. Below is a sample of the analysis you would receive when the service is available.

## Detailed Section Assessment
### 1. Title and Abstract
- **Assessment**: Unable to assess due to service unavailability
- **Recommendations**: Please try again when the service is available

### 2. Introduction
- **Assessment**: Unable to assess due to service unavailability
- **Recommendations**: Please try again when the service is available

## Rigor Assessment
### 1. Originality and Impact
- **Assessment**: Unable to assess due to service unavailability
- **Recommendations**: Please try again when the service is available

## Writing Assessment
### 1. Language and Style
- **Assessment**: Unable to assess due to service unavailability
- **Recommendations**: Please try again when the service is available

## Overall Recommendations
1. Try again later when the AI service is available
2. Check your internet connection
3. Verify your API key is valid and has sufficient quota
"""

POST_REJECTION_MOCK_NOTE = (
    "\n\n## Note: This is a mock response. The actual analysis would include "
    "detailed feedback on the reviewer comments."
)

PREAMBLE_TITLE = "Full Response"
FALLBACK_TITLE = "Analysis Results"
MOCK_TITLE = "API Service Unavailable"


def parse_llm_response(text: str, analysis_type: AnalysisType) -> AnalysisResult:
    """Parse the oracle's markdown into a two-level section tree.

    ``## `` opens a section, ``### `` opens a subsection of the current section;
    any other non-blank line (stripped) is appended with a trailing newline to the
    open subsection, or to the section when none is open. Blank lines are dropped.
    Text before the first ``## `` heading is collected under "Full Response".
    Sections with neither content nor subsections are not emitted; duplicate
    titles are kept as separate entries.
    """
    sections: List[AnalysisSection] = []
    current = AnalysisSection(title=PREAMBLE_TITLE)
    subsection: Optional[AnalysisSubsection] = None

    def close_subsection():
        nonlocal subsection
        if subsection is not None:
            current.subsections.append(subsection)
            subsection = None

    def close_section():
        close_subsection()
        if current.content or current.subsections:
            sections.append(current)

    for raw in text.split("\n"):
        line = raw.strip()
        if line.startswith("## "):
            close_section()
            current = AnalysisSection(title=line[3:].strip())
        elif line.startswith("### "):
            close_subsection()
            subsection = AnalysisSubsection(title=line[4:].strip())
        elif line:
            if subsection is not None:
                subsection.content += line + "\n"
            else:
                current.content += line + "\n"

    close_section()

    if not sections:
        sections = [AnalysisSection(title=FALLBACK_TITLE, content=text)]

    return AnalysisResult(sections=sections, analysis_type=analysis_type)


def build_mock_response(analysis_type: AnalysisType) -> AnalysisResult:
    """Placeholder result used when the oracle is unreachable; not markdown-parsed."""
    content = MOCK_RESPONSE
    if analysis_type == AnalysisType.POST_REJECTION:
        content += POST_REJECTION_MOCK_NOTE
    return AnalysisResult(
        sections=[AnalysisSection(title=MOCK_TITLE, content=content)],
        analysis_type=analysis_type,
        is_mock=True,
    )
