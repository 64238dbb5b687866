from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from typing import Optional
import logging

from studyvault.core.config import get_settings
from studyvault.core.errors import ExtractionFailed, SyllabusError, UnsupportedFormat, ValidationFailed
from studyvault.schemas.syllabus import AnalyzeSyllabusRequest, SyllabusAnalysisResponse
from studyvault.services.document_extractor import get_supported_extensions_display
from studyvault.services.pipeline import SyllabusPipeline
from studyvault.services.syllabus_store import SyllabusStore, get_store

logger = logging.getLogger(__name__)
router = APIRouter()

ERROR_STATUS = {
    UnsupportedFormat: 415,
    ExtractionFailed: 422,
    ValidationFailed: 400,
}


def get_pipeline() -> SyllabusPipeline:
    return SyllabusPipeline()


def _error_response(error: SyllabusError) -> HTTPException:
    detail = {"error": error.kind, "detail": str(error)}
    if isinstance(error, (UnsupportedFormat, ExtractionFailed)):
        detail["supportedFormats"] = get_supported_extensions_display()
    return HTTPException(status_code=ERROR_STATUS.get(type(error), 500), detail=detail)


@router.post("/analyze", response_model=SyllabusAnalysisResponse)
def analyze_syllabus(
    request: AnalyzeSyllabusRequest,
    pipeline: SyllabusPipeline = Depends(get_pipeline),
):
    """
    Analyze syllabus text that was already extracted by the client.

    - If the client sends pre-parsed assignments they are used as-is
    - Otherwise assignments are found deterministically, with AI as a fallback
    """
    try:
        if not request.course_id or not request.user_id or not request.text:
            raise ValidationFailed("Missing required fields: courseId, userId, or text")

        logger.info(
            f"Processing syllabus text for user: {request.user_id}, course: {request.course_id} "
            f"({len(request.text)} characters, {len(request.assignments or [])} pre-parsed assignments)"
        )

        if request.assignments:
            result = pipeline.run_preparsed(request.text, request.assignments)
        else:
            result = pipeline.analyze_text(request.text)
    except SyllabusError as e:
        raise _error_response(e)

    return SyllabusAnalysisResponse.from_result(result)


@router.post("/parse", response_model=SyllabusAnalysisResponse)
async def parse_syllabus(
    syllabus: Optional[UploadFile] = File(None),
    course_id: Optional[str] = Form(None, alias="courseId"),
    user_id: Optional[str] = Form(None, alias="userId"),
    pipeline: SyllabusPipeline = Depends(get_pipeline),
    store: SyllabusStore = Depends(get_store),
):
    """
    Upload a syllabus document, analyze it and save the results to the course.

    - Supports PDF, Word (.docx/.doc), and text files
    - Updates the course's code, name, term and description
    - Creates one pending assignment per extracted entry
    """
    if not course_id or not user_id or syllabus is None:
        raise _error_response(ValidationFailed("Missing required fields: courseId, file, or userId"))

    file_content = await syllabus.read()

    max_size = get_settings().max_upload_mb * 1024 * 1024
    if len(file_content) > max_size:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size for syllabus is {get_settings().max_upload_mb}MB."
        )

    logger.info(f"Processing file: {syllabus.filename} ({len(file_content)} bytes) for course: {course_id}")

    try:
        result = await run_in_threadpool(pipeline.run, file_content, syllabus.filename or "")
    except SyllabusError as e:
        raise _error_response(e)

    try:
        await run_in_threadpool(store.save, course_id, user_id, syllabus.filename, result)
    except LookupError:
        raise HTTPException(status_code=404, detail="Course not found")

    return SyllabusAnalysisResponse.from_result(result, course_id=course_id)
