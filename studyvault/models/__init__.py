# Import all models here so Base.metadata is complete
from studyvault.models.course import Course, Assignment

__all__ = [
    "Course",
    "Assignment",
]
