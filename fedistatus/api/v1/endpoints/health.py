from fastapi import APIRouter, Depends
from fastapi.responses import ORJSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fedistatus.core.config import settings
from fedistatus.core.database import get_db

router = APIRouter()

@router.get("/")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Health check endpoint"""
    db_status = "healthy"
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        db_status = f"unhealthy: {str(e)}"

    # 直接回傳 ORJSONResponse 並加快取極短 TTL
    return ORJSONResponse({
        "status": "ok",
        "database": db_status,
        "service": settings.PROJECT_NAME
    }, headers={"Cache-Control": "public, max-age=5"})
