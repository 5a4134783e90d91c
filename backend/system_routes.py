"""
Health check API routes
"""
from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter()


@router.get("/ok", response_class=PlainTextResponse)
async def ok():
    """Health probe"""
    return "OK"
