"""Typed failures raised by the syllabus analysis pipeline.

Each error carries a stable ``kind`` string that the HTTP layer reports back
to clients alongside the human-readable message.
"""


class SyllabusError(Exception):
    """Base class for syllabus pipeline failures."""

    kind = "SyllabusError"


class UnsupportedFormat(SyllabusError):
    """The filename extension is not one of the supported document formats."""

    kind = "UnsupportedFormat"


class ExtractionFailed(SyllabusError):
    """Text could not be extracted, or the extracted text is not meaningful."""

    kind = "ExtractionFailed"


class AIServiceUnavailable(SyllabusError):
    """No text-generation service is configured or reachable.

    Handled inside the AI fallback; never surfaces from the pipeline.
    """

    kind = "AIServiceUnavailable"


class ValidationFailed(SyllabusError):
    """Required request context (course or user identifier, text) is missing."""

    kind = "ValidationFailed"
