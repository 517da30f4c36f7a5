from src.routes.dashboard import router as dashboard_router
from src.routes.device import router as device_router
from src.routes.iot import router as iot_router
from src.routes.livestock import router as livestock_router
from src.routes.logs import router as logs_router
from src.routes.public import router as public_router

__all__ = [
    "dashboard_router",
    "device_router",
    "iot_router",
    "livestock_router",
    "logs_router",
    "public_router",
]
