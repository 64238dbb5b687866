"""
Course metadata extraction.

Recovers the course code, name, term and description from the top of a
syllabus using line-oriented pattern matching. Each field is extracted
independently; anything not found keeps its sentinel value.
"""

import logging
import re
from typing import List, Optional

from studyvault.schemas.syllabus import (
    CourseMetadata,
    NO_DESCRIPTION,
    UNKNOWN_CODE,
    UNKNOWN_NAME,
    UNKNOWN_TERM,
)

logger = logging.getLogger(__name__)

# "CS 101", "MATH1010", "WW-HUMN 340", "BIO 2200L"
COURSE_CODE_PATTERN = re.compile(r"\b[A-Z]{2,4}(?:-[A-Z]+)?\s*\d{3,4}[A-Z]?\b")

TERM_PATTERN = re.compile(
    r"(Spring|Summer|Fall|Winter|January|February|March|April|May|June|July|"
    r"August|September|October|November|December)\s+20\d{2}",
    re.IGNORECASE,
)

DESCRIPTION_KEYWORDS = ["description", "overview", "course goals", "learning outcomes"]

CODE_SCAN_LINES = 20
NAME_FALLBACK_LINES = 10
TERM_SCAN_LINES = 30
DESCRIPTION_LOOKAHEAD = 4


def _find_code(lines: List[str]) -> Optional[str]:
    for line in lines[:CODE_SCAN_LINES]:
        match = COURSE_CODE_PATTERN.search(line)
        if match:
            return match.group(0).strip()
    return None


def _find_name(lines: List[str], code: Optional[str]) -> Optional[str]:
    if code:
        for line in lines[:CODE_SCAN_LINES]:
            if code in line:
                residue = line.replace(code, "", 1).strip()
                if 5 < len(residue) < 100:
                    name = residue.strip("-: \t")
                    if name:
                        return name
                    break

    # Title-like line near the top that is not the institution name
    for line in lines[:NAME_FALLBACK_LINES]:
        if 10 < len(line) < 100 and "University" not in line and "College" not in line:
            return line
    return None


def _find_term(lines: List[str]) -> Optional[str]:
    for line in lines[:TERM_SCAN_LINES]:
        match = TERM_PATTERN.search(line)
        if match:
            return match.group(0)
    return None


def _find_description(lines: List[str]) -> Optional[str]:
    for i, line in enumerate(lines):
        line_lower = line.lower()
        if not any(keyword in line_lower for keyword in DESCRIPTION_KEYWORDS):
            continue
        for candidate in lines[i + 1:i + 1 + DESCRIPTION_LOOKAHEAD]:
            if 20 < len(candidate) < 500:
                return candidate
    return None


def extract_course_metadata(text: str) -> CourseMetadata:
    """Extract course code, name, term and description from syllabus text."""
    lines = [line.strip() for line in (text or "").split("\n") if line.strip()]

    code = _find_code(lines)
    name = _find_name(lines, code)
    term = _find_term(lines)
    description = _find_description(lines)

    logger.info(f"Course metadata: code={code!r} name={name!r} term={term!r}")

    return CourseMetadata(
        code=code or UNKNOWN_CODE,
        name=name or UNKNOWN_NAME,
        term=term or UNKNOWN_TERM,
        description=description or NO_DESCRIPTION,
    )
