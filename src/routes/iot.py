import json
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.core.configs import settings
from src.core.db import get_db
from src.core.errors import DeviceNotActiveError, NotFoundError
from src.models.reading import WeightReadingAccepted, WeightReadingPayload
from src.services.device.ingestion import ingest_weight
from src.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/iot", tags=["IoT"])


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


@router.post(
    "/weights",
    status_code=status.HTTP_201_CREATED,
    response_model=WeightReadingAccepted,
    summary="Accept a weight reading from a weighing device.",
)
async def post_weight(
    request: Request,
    x_growt_iot_key: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
):
    if not settings.IOT_API_KEY:
        logger.error("IOT_API_KEY is not configured")
        return _error(500, "Server misconfigured: missing IOT_API_KEY")

    if x_growt_iot_key != settings.IOT_API_KEY:
        return _error(401, "Unauthorized")

    try:
        body = await request.json()
    except ValueError:
        return _error(400, "Invalid JSON body")
    if body is None:
        return _error(400, "Invalid JSON body")

    try:
        payload = WeightReadingPayload.model_validate(body)
    except ValidationError as e:
        return _error(400, "Invalid payload", details=json.loads(e.json()))

    try:
        weight_id = await run_in_threadpool(ingest_weight, db, payload)
    except DeviceNotActiveError as e:
        return _error(403, str(e))
    except NotFoundError as e:
        return _error(404, str(e))
    except SQLAlchemyError:
        return _error(500, "Failed to insert weight")

    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=WeightReadingAccepted(weight_id=weight_id).model_dump(),
    )
