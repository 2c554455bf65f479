"""
Turn a free-text model answer into the fixed four-section report.

Every field is pulled out with an independent, case-insensitive regex that
captures the text after a label up to the next bullet or line break. When a
label is missing the field falls back to a static sentence, so formatting
never fails. The labels are loose on purpose (``pattern:`` also matches
``design pattern:``), which means the extraction can pick up the wrong line
from an answer that strays from the requested template.
"""

from __future__ import annotations

import re
from typing import Dict, Optional, Sequence

from .search import AnalysisSections

SECTION_RULE = "-" * 16
NO_CODE_EXAMPLE = "[No code example provided]"
STRONG_TYPING_CAUSE = (
    "Python is strongly typed and does not allow operations between incompatible types"
)
FALLBACK_STEPS = (
    "• Step 1: Identify the issue\n"
    "• Step 2: Apply the fix\n"
    "• Step 3: Test the solution"
)

BEFORE_KEYWORDS = ("incorrect", "problematic", "error")
AFTER_KEYWORDS = ("correct", "fixed", "solution")
ALTERNATIVE_KEYWORDS = ("alternative", "another", "other")

_FIELD_PATTERNS: Dict[str, re.Pattern[str]] = {
    "technical_cause": re.compile(r"technical(?:\s+cause)?:?\s*([^•\n]+)", re.IGNORECASE),
    "common_scenarios": re.compile(r"common(?:\s+scenarios)?:?\s*([^•\n]+)", re.IGNORECASE),
    "technical_background": re.compile(r"(?:technical\s+)?background:?\s*([^•\n]+)", re.IGNORECASE),
    "design_pattern": re.compile(r"(?:design\s+pattern|pattern):?\s*([^•\n]+)", re.IGNORECASE),
    "code_organization": re.compile(r"(?:code\s+organization|organize):?\s*([^•\n]+)", re.IGNORECASE),
    "common_pitfalls": re.compile(r"(?:common\s+pitfalls|pitfalls):?\s*([^•\n]+)", re.IGNORECASE),
    "error_handling": re.compile(r"(?:error\s+handling|handle):?\s*([^•\n]+)", re.IGNORECASE),
}

_FIELD_FALLBACKS: Dict[str, str] = {
    "technical_cause": "Unable to determine cause",
    "common_scenarios": "Various scenarios where type mismatches occur",
    "technical_background": "Language-specific type system requirements",
    "design_pattern": "Type validation and conversion patterns",
    "code_organization": "Separate data processing from business logic",
    "common_pitfalls": "Mixing types without proper validation",
    "error_handling": "Use try-catch blocks for type conversions",
}

_STEP_PATTERN = re.compile(r"step(?:\s+\d+)?:?\s*[^•\n]+", re.IGNORECASE)
_STEP_LABEL = re.compile(r"step\s+\d+:?\s*", re.IGNORECASE)


def extract_field(text: str, field: str) -> str:
    match = _FIELD_PATTERNS[field].search(text)
    return match.group(1).strip() if match else _FIELD_FALLBACKS[field]


def extract_technical_cause(text: str, query: str) -> str:
    # Any query mentioning TypeError gets the strong-typing explanation,
    # whatever the model said.
    if "TypeError" in query:
        return STRONG_TYPING_CAUSE
    return extract_field(text, "technical_cause")


def extract_steps(text: str) -> str:
    """Collect every ``step`` fragment in order and renumber from 1."""
    steps = [match.group(0) for match in _STEP_PATTERN.finditer(text)]
    if not steps:
        return FALLBACK_STEPS
    return "\n".join(
        f"• Step {index}: {_STEP_LABEL.sub('', step, count=1)}"
        for index, step in enumerate(steps, start=1)
    )


def extract_code_example(text: str, *keywords: str) -> str:
    """Return the first fenced block on a line mentioning one of ``keywords``."""
    alternation = "|".join(re.escape(keyword) for keyword in keywords)
    pattern = re.compile(rf"(?:{alternation}).*?```.*?\n([\s\S]*?)```", re.IGNORECASE)
    match = pattern.search(text)
    return match.group(1).strip() if match else NO_CODE_EXAMPLE


def build_sections(text: str, query: str, code: Optional[str] = None) -> AnalysisSections:
    """Extract every report field from the model answer.

    The caller's own snippet, when given, is used as the "before" example.
    """
    return AnalysisSections(
        technical_cause=extract_technical_cause(text, query),
        common_scenarios=extract_field(text, "common_scenarios"),
        technical_background=extract_field(text, "technical_background"),
        steps=extract_steps(text),
        design_pattern=extract_field(text, "design_pattern"),
        code_organization=extract_field(text, "code_organization"),
        common_pitfalls=extract_field(text, "common_pitfalls"),
        error_handling=extract_field(text, "error_handling"),
        before_code=code or extract_code_example(text, *BEFORE_KEYWORDS),
        after_code=extract_code_example(text, *AFTER_KEYWORDS),
        alternative_code=extract_code_example(text, *ALTERNATIVE_KEYWORDS),
    )


def format_section(title: str, items: Dict[str, str]) -> str:
    lines = [title, SECTION_RULE]
    for label, value in items.items():
        # Steps arrive already bulleted.
        lines.append(value if label == "Steps" else f"• {label}: {value}")
    return "\n".join(lines)


def format_code_examples(language: str, before: str, after: str, alternatives: str) -> str:
    blocks: Sequence[tuple[str, str]] = (
        ("Before:", before),
        ("After:", after),
        ("Alternative Approaches:", alternatives),
    )
    body = "\n\n".join(f"{label}\n```{language}\n{code}\n```" for label, code in blocks)
    return f"Code Examples\n{SECTION_RULE}\n{body}"


def format_report(sections: AnalysisSections, language: str) -> str:
    parts = [
        format_section(
            "Root Cause Analysis",
            {
                "Technical Cause": sections.technical_cause,
                "Common Scenarios": sections.common_scenarios,
                "Technical Background": sections.technical_background,
            },
        ),
        format_section("Step-by-Step Solution", {"Steps": sections.steps}),
        format_section(
            "Best Practices for Prevention",
            {
                "Design Pattern": sections.design_pattern,
                "Code Organization": sections.code_organization,
                "Common Pitfalls": sections.common_pitfalls,
                "Error Handling": sections.error_handling,
            },
        ),
        format_code_examples(
            language,
            sections.before_code,
            sections.after_code,
            sections.alternative_code,
        ),
    ]
    return "\n\n".join(parts)
