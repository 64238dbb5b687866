"""
Syllabus analysis pipeline.

bytes -> text -> course metadata -> assignments (deterministic, else AI)
-> ParsedSyllabusResult

Collaborators are passed in so the pipeline runs without a live model or
store; one instance may be shared across requests since it keeps no
per-document state.
"""
import logging
from typing import Callable, Iterable, List, Optional

from studyvault.core.config import get_settings
from studyvault.core.errors import ExtractionFailed
from studyvault.schemas.syllabus import AssignmentRecord, ParsedSyllabusResult, PreParsedAssignment
from studyvault.services.ai_fallback import AIFallbackExtractor
from studyvault.services.assignment_extractor import extract_assignments
from studyvault.services.course_metadata import extract_course_metadata
from studyvault.services.document_extractor import ExtractedText, extract_text

logger = logging.getLogger(__name__)


class SyllabusPipeline:
    """
    Turns one syllabus document into a course record and its assignments.

    Args:
        ai_extractor: Fallback used only when no assignments are found
            deterministically
        min_text_length: Extracted documents shorter than this are rejected
        text_extractor: ``(bytes, filename) -> ExtractedText``
    """

    def __init__(
        self,
        ai_extractor: Optional[AIFallbackExtractor] = None,
        min_text_length: Optional[int] = None,
        text_extractor: Callable[[bytes, str], ExtractedText] = extract_text,
    ):
        self.ai_extractor = ai_extractor or AIFallbackExtractor()
        self.min_text_length = (
            min_text_length if min_text_length is not None else get_settings().min_text_length
        )
        self.text_extractor = text_extractor

    def run(self, file_content: bytes, filename: str) -> ParsedSyllabusResult:
        """Extract text from an uploaded document and analyze it."""
        extracted = self.text_extractor(file_content, filename)
        text = extracted.content.strip()

        if len(text) < self.min_text_length:
            raise ExtractionFailed(
                f"Failed to extract meaningful text from {filename} "
                f"({len(text)} characters, need at least {self.min_text_length})"
            )

        logger.info(f"Analyzing {filename} ({extracted.source_format.value}, {len(text)} characters)")
        return self.analyze_text(text)

    def analyze_text(self, text: str) -> ParsedSyllabusResult:
        """Analyze already-extracted syllabus text."""
        if not text or not text.strip():
            raise ExtractionFailed("Syllabus text is empty")

        course = extract_course_metadata(text)
        assignments = extract_assignments(text, course.term)

        if not assignments:
            logger.info("No structured assignments found, using AI assistance")
            assignments = self.ai_extractor.extract(text, course)

        logger.info(f"Parsed course {course.code} - {course.name} with {len(assignments)} assignments")
        return ParsedSyllabusResult(course=course, assignments=assignments)

    def run_preparsed(self, text: str, candidates: Iterable[PreParsedAssignment]) -> ParsedSyllabusResult:
        """
        Build a result from assignments the caller already identified.

        Only course metadata is extracted from the text; titles and due dates
        are taken as given and descriptions default to "Assignment: {title}".
        """
        if not text or not text.strip():
            raise ExtractionFailed("Syllabus text is empty")

        course = extract_course_metadata(text)
        assignments: List[AssignmentRecord] = [
            AssignmentRecord(
                title=candidate.title,
                description=candidate.description or f"Assignment: {candidate.title}",
                due_date=candidate.due_date,
                status="pending",
                tags=[],
            )
            for candidate in candidates
        ]

        logger.info(f"Using {len(assignments)} pre-parsed assignments for {course.code}")
        return ParsedSyllabusResult(course=course, assignments=assignments)
