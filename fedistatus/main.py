import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from sqlalchemy.exc import SQLAlchemyError
import uvicorn
import httpx

from fedistatus.core.config import settings
from fedistatus.core.database import engine
from fedistatus.core.errors import StorageError
from fedistatus.core.federation_client import FederationClient
from fedistatus.api.v1.api import api_router
from fedistatus.core.activitypub import users_router, well_known_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Mastodon-compatible account statuses for local and federated actors",
    version="1.0.0",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    default_response_class=ORJSONResponse,
)

# CORS settings
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Enable gzip compression for large responses
app.add_middleware(GZipMiddleware, minimum_size=500)

# Include API routes
app.include_router(api_router, prefix=settings.API_V1_STR)

# Include ActivityPub routes
app.include_router(well_known_router, prefix="/.well-known", tags=["activitypub"])
app.include_router(users_router, tags=["activitypub"])

@app.exception_handler(StorageError)
@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: Exception):
    logger.error("storage failure on %s: %s", request.url.path, exc)
    detail = str(exc) if isinstance(exc, StorageError) else f"SQL error: {exc}"
    return ORJSONResponse({"detail": detail}, status_code=500)

@app.exception_handler(httpx.HTTPError)
async def federation_error_handler(request: Request, exc: httpx.HTTPError):
    logger.error("federation request failed on %s: %s", request.url.path, exc)
    return ORJSONResponse({"detail": f"federation error: {exc}"}, status_code=502)

@app.on_event("startup")
async def startup_event():
    """Initialize resources on application startup"""
    # 建立共享 httpx AsyncClient（HTTP/2、連線池、逾時）
    FederationClient.set_shared_client(
        httpx.AsyncClient(
            http2=True,
            timeout=httpx.Timeout(settings.HTTP_TIMEOUT, read=settings.HTTP_READ_TIMEOUT),
            limits=httpx.Limits(max_connections=100, max_keepalive_connections=100),
            headers={"User-Agent": settings.USER_AGENT},
            follow_redirects=True,
        )
    )

@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup resources on application shutdown"""
    client = FederationClient.shared_client
    if client is not None:
        await client.aclose()
    FederationClient.set_shared_client(None)
    await engine.dispose()

@app.get("/")
async def root():
    """Root path"""
    return {"message": settings.PROJECT_NAME}

if __name__ == "__main__":
    uvicorn.run(
        "fedistatus.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
