# API Routes
from .analysis import router as analysis_router
from .simulation import router as simulation_router

__all__ = [
    "analysis_router",
    "simulation_router",
]
