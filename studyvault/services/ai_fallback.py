"""
AI Fallback Extractor.

Asks a text-generation model for the assignments in a syllabus when the
deterministic extractor found none. This is a best-effort step: every failure
(no model configured, provider error or timeout, empty or malformed response)
ends in an empty list, never an exception.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError

from studyvault.core.config import get_settings
from studyvault.core.errors import AIServiceUnavailable
from studyvault.schemas.syllabus import AssignmentRecord, CourseMetadata
from studyvault.services.assignment_tagger import describe_assignment
from studyvault.services.llm_utils import (
    LLMResponse,
    get_llm_with_tracking,
    invoke_llm_with_metrics,
    parse_json_response,
)

logger = logging.getLogger(__name__)


EXTRACTION_PROMPT = """Extract assignment information from this syllabus. Focus ONLY on actual assignments, not general course information.

Course: {code} - {name}
Term: {term}

Return ONLY valid JSON in this format:
{{
  "assignments": [
    {{
      "title": "exact assignment title from syllabus",
      "description": "brief description based on title",
      "dueDate": "YYYY-MM-DD or null if no date found",
      "status": "pending",
      "tags": ["relevant", "tags"]
    }}
  ]
}}

Rules:
- Only extract assignments that clearly exist in the syllabus
- Do not invent assignments or dates
- Convert dates to YYYY-MM-DD format
- Tags should be based on assignment type: Discussion, Quiz, Exam, Essay, Project, Lab, Assignment
- If no due date is found, use null

Syllabus text:
{syllabus_text}"""

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class _AIAssignmentItem(BaseModel):
    """Shape of one assignment as returned by the model."""
    title: str
    description: Optional[str] = None
    due_date: Optional[str] = Field(None, alias="dueDate")
    tags: Optional[List[str]] = None


@dataclass
class AIParseResult:
    """Outcome of parsing a model response: assignments on success, else an error."""
    ok: bool
    assignments: List[AssignmentRecord] = field(default_factory=list)
    error: Optional[str] = None


def build_prompt(text: str, course: CourseMetadata, max_chars: int = 4000) -> str:
    return EXTRACTION_PROMPT.format(
        code=course.code,
        name=course.name,
        term=course.term,
        syllabus_text=(text or "")[:max_chars],
    )


def parse_ai_assignments(content: Optional[str]) -> AIParseResult:
    """
    Parse and validate a model response.

    The response must be a JSON object with an ``assignments`` list. Items
    that do not match the expected shape, or whose title is 3 characters or
    shorter, are dropped. Due dates not in YYYY-MM-DD form become null.
    """
    if not content or not isinstance(content, str):
        return AIParseResult(ok=False, error="empty response")

    parsed = parse_json_response(content)
    if parsed is None:
        return AIParseResult(ok=False, error="response is not a JSON object")

    items = parsed.get("assignments")
    if not isinstance(items, list):
        return AIParseResult(ok=False, error="missing 'assignments' list")

    assignments: List[AssignmentRecord] = []
    for raw in items:
        try:
            item = _AIAssignmentItem.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Dropping malformed AI assignment: {e.errors()[:1]}")
            continue

        title = item.title.strip()
        if len(title) <= 3:
            continue

        due_date = item.due_date if item.due_date and ISO_DATE_PATTERN.match(item.due_date) else None
        assignments.append(AssignmentRecord(
            title=title,
            description=(item.description or "").strip() or describe_assignment(title),
            due_date=due_date,
            status="pending",
            tags=item.tags or [],
        ))

    return AIParseResult(ok=True, assignments=assignments)


class AIFallbackExtractor:
    """
    Single-shot AI extraction of assignments.

    Args:
        llm: LangChain chat model; resolved from settings when omitted
        model_name: Name of the model for cost tracking
        max_input_chars: How much of the syllabus text goes into the prompt
    """

    def __init__(self, llm=None, model_name: Optional[str] = None, max_input_chars: Optional[int] = None):
        self._llm = llm
        self._model_name = model_name
        self.max_input_chars = max_input_chars or get_settings().ai_max_input_chars

    def _resolve_llm(self):
        if self._llm is None:
            try:
                self._llm, self._model_name = get_llm_with_tracking()
            except Exception as e:
                logger.exception(f"Failed to initialize LLM client: {e}")
                raise AIServiceUnavailable(f"LLM client could not be created: {e}") from e
        if self._llm is None:
            raise AIServiceUnavailable("No LLM API key configured")
        return self._llm, self._model_name or "unknown"

    def extract(self, text: str, course: CourseMetadata) -> List[AssignmentRecord]:
        """Return assignments found by the model, or an empty list on any failure."""
        try:
            llm, model_name = self._resolve_llm()
        except AIServiceUnavailable as e:
            logger.warning(f"AI fallback skipped: {e}")
            return []

        prompt = build_prompt(text, course, self.max_input_chars)
        response: LLMResponse = invoke_llm_with_metrics(llm, prompt, model_name)

        if not response.success:
            logger.warning(f"AI fallback failed: {response.metrics.error_message}")
            return []

        result = parse_ai_assignments(response.content)
        if not result.ok:
            logger.warning(f"AI fallback returned unusable content: {result.error}")
            return []

        logger.info(
            f"AI fallback found {len(result.assignments)} assignments "
            f"({response.metrics.total_tokens} tokens, model={model_name})"
        )
        return result.assignments
