import fastapi
import fastapi_swagger_dark as fsd
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.routes import (
    dashboard_router,
    device_router,
    iot_router,
    livestock_router,
    logs_router,
    public_router,
)
from src.core.configs import settings
from src.core.db import get_db
from src.utils.logging import get_logger, setup_logging

setup_logging(settings.log_level)
logger = get_logger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description=settings.description,
    version=settings.version,
    docs_url=None,
    redoc_url=settings.redoc_url,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

router = fastapi.APIRouter()
fsd.install(router)
app.include_router(router)

for routers in [
    iot_router,
    livestock_router,
    device_router,
    logs_router,
    dashboard_router,
    public_router,
]:
    app.include_router(routers)


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title=settings.app_name,
        version=settings.version,
        description=settings.description,
        routes=app.routes,
    )
    components = openapi_schema.setdefault("components", {})
    security_schemes = components.setdefault("securitySchemes", {})
    security_schemes["BearerAuth"] = {
        "type": "http",
        "scheme": "bearer",
        "bearerFormat": "JWT",
    }
    # Apply globally so Swagger shows Authorize and sends the header
    openapi_schema["security"] = [{"BearerAuth": []}]
    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi


@app.get("/")
async def root(request: Request):
    """Root endpoint"""
    return {
        "message": "Welcome to GROWT API",
        "version": settings.version,
        "docs": settings.docs_url,
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": settings.app_name}


@app.get("/api/check-connection")
def check_connection(db: Session = Depends(get_db)):
    """Verify the database answers a trivial query"""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Database connection check failed: {e}")
        raise HTTPException(status_code=503, detail="Database unreachable") from e
    return {"status": "connected"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("src.main:app", host="0.0.0.0", port=8000, reload=True)
