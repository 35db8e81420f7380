"""Simulation API routes."""

from fastapi import APIRouter

from ..schemas.common import APIResponse
from ..schemas.simulation import SimulationStartRequest, SimulationStopResponse
from ..services.simulation_service import simulation_service

router = APIRouter(prefix="/trading-systems", tags=["simulation"])


@router.post("/{ts_id}/simulation", status_code=202, response_model=APIResponse[dict])
def start_simulation(ts_id: int, request: SimulationStartRequest):
    """Queue a bootstrap simulation, replacing any running one."""
    return APIResponse(data=simulation_service.start(ts_id, request))


@router.get("/{ts_id}/simulation", response_model=APIResponse[dict])
def get_simulation_result(ts_id: int):
    """Get the live simulation result (status idle when there is none)."""
    return APIResponse(data=simulation_service.get_result(ts_id))


@router.delete("/{ts_id}/simulation", response_model=APIResponse[SimulationStopResponse])
def stop_simulation(ts_id: int):
    """Stop the simulation of a trading system."""
    return APIResponse(data=SimulationStopResponse(stopped=simulation_service.stop(ts_id)))
