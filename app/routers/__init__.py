# Routers package
from . import appointments_router
from . import doctors_router
from . import video_router

__all__ = [
    "appointments_router",
    "doctors_router",
    "video_router",
]
