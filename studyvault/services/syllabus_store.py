"""Persistence of analysed syllabi as course and assignment records."""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from studyvault.core.database import get_db
from studyvault.models.course import Assignment, Course
from studyvault.schemas.syllabus import ParsedSyllabusResult

logger = logging.getLogger(__name__)


class SyllabusStore(ABC):
    """Where parsed syllabi end up. Implementations own identity assignment."""

    @abstractmethod
    def save(self, course_id: str, user_id: str, filename: Optional[str], result: ParsedSyllabusResult) -> int:
        """Apply the course fields and create the assignments; return how many were created."""


class SqlSyllabusStore(SyllabusStore):
    """SQLAlchemy-backed store: one commit per analysed syllabus."""

    def __init__(self, db: Session):
        self.db = db

    def save(self, course_id: str, user_id: str, filename: Optional[str], result: ParsedSyllabusResult) -> int:
        try:
            pk = int(course_id)
        except (TypeError, ValueError):
            raise LookupError(f"Course {course_id} not found")

        course = self.db.query(Course).filter(Course.id == pk).first()
        if not course:
            raise LookupError(f"Course {course_id} not found")

        course.code = result.course.code
        course.name = result.course.name
        course.term = result.course.term
        course.description = result.course.description
        if filename:
            course.syllabus_name = filename

        self.db.add_all([
            Assignment(
                course_id=course.id,
                user_id=user_id,
                title=record.title,
                description=record.description,
                due_date=record.due_date,
                status=record.status,
                tags=list(record.tags),
            )
            for record in result.assignments
        ])

        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Saved {len(result.assignments)} assignments for course {course_id}")
        return len(result.assignments)


def get_store(db: Session = Depends(get_db)) -> SyllabusStore:
    return SqlSyllabusStore(db)
