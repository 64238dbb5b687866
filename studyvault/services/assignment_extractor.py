"""
Deterministic assignment extraction.

Syllabi tend to use one of two layouts:

1. every assignment line starts with its due date ("3/10 Module 1 Discussion")
2. a date heading followed by several assignment bullets under it

The inline strategy handles the first layout. The structured-list scan only
runs when the inline strategy finds nothing, so the same lines are never
emitted twice.
"""

import logging
import re
from typing import List, Optional

from studyvault.schemas.syllabus import AssignmentRecord
from studyvault.services.assignment_tagger import describe_assignment, tag_assignment
from studyvault.services.date_normalizer import normalize_date

logger = logging.getLogger(__name__)

ASSIGNMENT_KEYWORDS = (
    "module|assignment|discussion|quiz|exam|essay|project|worksheet|lab|homework"
)

INLINE_ASSIGNMENT_PATTERN = re.compile(
    r"(\d{1,2}/\d{1,2}/\d{2,4}|\d{1,2}/\d{1,2})\s+(.*(?:" + ASSIGNMENT_KEYWORDS + r").*)",
    re.IGNORECASE,
)
KEYWORD_PATTERN = re.compile(ASSIGNMENT_KEYWORDS, re.IGNORECASE)
BARE_DATE_PATTERN = re.compile(r"(\d{1,2}/\d{1,2}/?\d{0,4})")
LEADING_DATE_PATTERN = re.compile(r"^\d{1,2}/\d{1,2}/?\d{0,4}\s*")
WHITESPACE_PATTERN = re.compile(r"\s+")

MIN_TITLE_LENGTH = 3
MIN_LIST_LINE_LENGTH = 10


def clean_assignment_title(title: str) -> str:
    """Remove a leading date token and normalize whitespace."""
    title = LEADING_DATE_PATTERN.sub("", title or "")
    return WHITESPACE_PATTERN.sub(" ", title).strip()


def _build_record(title: str, due_date: Optional[str]) -> AssignmentRecord:
    return AssignmentRecord(
        title=title,
        description=describe_assignment(title),
        due_date=due_date,
        status="pending",
        tags=tag_assignment(title),
    )


def extract_inline_dated(lines: List[str], course_term: str) -> List[AssignmentRecord]:
    """Lines that carry both a date token and an assignment keyword."""
    assignments: List[AssignmentRecord] = []

    for line in lines:
        match = INLINE_ASSIGNMENT_PATTERN.search(line)
        if not match:
            continue

        date_str, title_str = match.groups()
        due_date = normalize_date(date_str, course_term)
        title = clean_assignment_title(title_str)

        if due_date and len(title) > MIN_TITLE_LENGTH:
            assignments.append(_build_record(title, due_date))

    return assignments


def extract_from_structured_lists(lines: List[str], course_term: str) -> List[AssignmentRecord]:
    """
    Date headings followed by assignment bullets.

    The most recent date token seen applies to every keyword line after it,
    until another date appears. Keyword lines before any date get no due date.
    """
    assignments: List[AssignmentRecord] = []
    current_date = ""

    for line in lines:
        date_match = BARE_DATE_PATTERN.search(line)
        if date_match:
            current_date = date_match.group(1)

        if KEYWORD_PATTERN.search(line) and len(line) > MIN_LIST_LINE_LENGTH:
            title = clean_assignment_title(line)
            if len(title) > MIN_TITLE_LENGTH:
                assignments.append(_build_record(title, normalize_date(current_date, course_term)))

    return assignments


def extract_assignments(text: str, course_term: str) -> List[AssignmentRecord]:
    """
    Find dated assignments in syllabus text without calling any external service.

    Returns an empty list when neither strategy finds anything; the caller
    decides whether to fall back to AI extraction.
    """
    lines = [line.strip() for line in (text or "").split("\n")]

    assignments = extract_inline_dated(lines, course_term)
    if assignments:
        logger.info(f"Found {len(assignments)} inline dated assignments")
        return assignments

    assignments = extract_from_structured_lists(lines, course_term)
    logger.info(f"Found {len(assignments)} assignments in structured lists")
    return assignments
