"""
Syllabus Schema - structured result of analysing one syllabus document.

Python attributes are snake_case; JSON on the wire uses the camelCase names
(``dueDate``, ``assignmentsCount``, ``courseId``) that the StudyVault client
expects.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal, Optional


UNKNOWN_CODE = "Unknown Course Code"
UNKNOWN_NAME = "Unknown Course Name"
UNKNOWN_TERM = "Unknown Term"
NO_DESCRIPTION = "No description available"


class CourseMetadata(BaseModel):
    """Course fields recovered from the syllabus; sentinels stand in for misses."""
    code: str = Field(UNKNOWN_CODE, description="Course code (e.g., WW-HUMN 340)")
    name: str = Field(UNKNOWN_NAME, description="Course name")
    term: str = Field(UNKNOWN_TERM, description="Academic term (e.g., Spring 2025)")
    description: str = Field(NO_DESCRIPTION, description="One-line course description")

    model_config = ConfigDict(frozen=True)


class AssignmentRecord(BaseModel):
    """A single graded item found in the syllabus."""
    title: str
    description: str
    due_date: Optional[str] = Field(None, alias="dueDate", description="YYYY-MM-DD or null")
    status: Literal["pending"] = "pending"
    tags: List[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class ParsedSyllabusResult(BaseModel):
    """Course record plus assignments in the order they were discovered."""
    course: CourseMetadata
    assignments: List[AssignmentRecord] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class PreParsedAssignment(BaseModel):
    """Assignment candidate already identified by the caller."""
    title: str
    due_date: Optional[str] = Field(None, alias="dueDate")
    description: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


# Request / response schemas for the HTTP boundary

class AnalyzeSyllabusRequest(BaseModel):
    """Pre-extracted text mode. Required fields are checked by the route."""
    course_id: Optional[str] = Field(None, alias="courseId")
    user_id: Optional[str] = Field(None, alias="userId")
    file_name: Optional[str] = Field(None, alias="fileName")
    text: Optional[str] = None
    assignments: Optional[List[PreParsedAssignment]] = None

    model_config = ConfigDict(populate_by_name=True)


class SyllabusAnalysisResponse(BaseModel):
    success: bool = True
    course_id: Optional[str] = Field(None, alias="courseId")
    course: CourseMetadata
    assignments: List[AssignmentRecord]
    assignments_count: int = Field(..., alias="assignmentsCount")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_result(cls, result: ParsedSyllabusResult, course_id: Optional[str] = None) -> "SyllabusAnalysisResponse":
        return cls(
            course_id=course_id,
            course=result.course,
            assignments=list(result.assignments),
            assignments_count=len(result.assignments),
        )
