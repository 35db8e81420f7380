"""Analysis service."""

import logging
from typing import Any

from core.trading_types import sort_by_exit
from evaluation.performance import PerformanceAnalyzer
from evaluation.quality import QualityAnalyzer

from ..schemas.analysis import PerformanceAnalysisRequest, QualityAnalysisRequest

logger = logging.getLogger(__name__)


class AnalysisService:
    """Service running the synchronous analyses."""

    def __init__(self):
        self.performance_analyzer = PerformanceAnalyzer()
        self.quality_analyzer = QualityAnalyzer()

    def run_performance(self, ts_id: int, request: PerformanceAnalysisRequest) -> dict[str, Any]:
        """Compute the performance analysis of a trading system."""
        trading_system = request.trading_system.to_trading_system(ts_id)
        trades = sort_by_exit(t.to_trade() for t in request.trades)
        daily_returns = [r.to_daily_return() for r in request.daily_returns]

        logger.info(f"Performance analysis of trading system {ts_id} on {len(trades)} trades")
        analysis = self.performance_analyzer.analyze(trading_system, trades, daily_returns)
        return analysis.to_dict()

    def run_quality(self, ts_id: int, request: QualityAnalysisRequest) -> dict[str, Any]:
        """
        Compute the quality analysis of a trading system.

        Raises:
            NoLossesError: If no trade lost money
        """
        trading_system = request.trading_system.to_trading_system(ts_id)
        trades = sort_by_exit(t.to_trade() for t in request.trades)
        regimes = [r.to_regime() for r in request.regimes]

        logger.info(f"Quality analysis of trading system {ts_id} on {len(trades)} trades")
        analysis = self.quality_analyzer.analyze(trading_system, trades, regimes)
        return analysis.to_dict()


analysis_service = AnalysisService()
