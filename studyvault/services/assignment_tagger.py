"""Keyword-based tags and one-line descriptions for assignment titles."""

from typing import List

# Scan order matters: tags are emitted in this order.
TAG_KEYWORDS = [
    ("discussion", "Discussion"),
    ("quiz", "Quiz"),
    ("exam", "Exam"),
    ("essay", "Essay"),
    ("project", "Project"),
    ("lab", "Lab"),
    ("worksheet", "Worksheet"),
    ("homework", "Homework"),
]

DESCRIPTION_PREFIXES = [
    ("discussion", "Discussion assignment"),
    ("quiz", "Quiz assessment"),
    ("exam", "Exam assessment"),
    ("essay", "Written essay assignment"),
    ("project", "Project assignment"),
    ("lab", "Laboratory assignment"),
    ("worksheet", "Worksheet assignment"),
]


def tag_assignment(title: str) -> List[str]:
    """Return category tags for an assignment title."""
    title_lower = (title or "").lower()

    tags = [tag for keyword, tag in TAG_KEYWORDS if keyword in title_lower]
    if not tags and "assignment" in title_lower:
        tags.append("Assignment")

    return tags


def describe_assignment(title: str) -> str:
    """Generate a short description from the first matching keyword."""
    title_lower = (title or "").lower()

    for keyword, prefix in DESCRIPTION_PREFIXES:
        if keyword in title_lower:
            return f"{prefix}: {title}"

    return f"Assignment: {title}"
