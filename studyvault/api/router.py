from fastapi import APIRouter
from studyvault.api.routes import syllabus

api_router = APIRouter()

api_router.include_router(syllabus.router, prefix="/syllabus", tags=["syllabus"])
