"""Evaluation module for Portfolio Analytics."""

from .performance import PerformanceAnalyzer, PerformanceAnalysis
from .quality import QualityAnalyzer, QualityAnalysis, MarketRegime
from .simulation import BootstrapSimulator, SimulationRequest, SimulationResult, SimulationStatus
from .job_manager import SimulationJobManager, SimulationProcess

__all__ = [
    'PerformanceAnalyzer',
    'PerformanceAnalysis',
    'QualityAnalyzer',
    'QualityAnalysis',
    'MarketRegime',
    'BootstrapSimulator',
    'SimulationRequest',
    'SimulationResult',
    'SimulationStatus',
    'SimulationJobManager',
    'SimulationProcess',
]
