"""
CSV loaders for trades, daily returns and market regimes.

Records are read with pandas and converted to the engine's record types.
Trades are sorted by exit date, the order the analyses expect.
"""

import logging
from typing import Iterable, List

import pandas as pd

from core.trading_types import DailyReturn, Trade, TradeType, ValidationError
from evaluation.quality import MarketRegime

logger = logging.getLogger(__name__)

TRADE_COLUMNS = ['entry_date', 'exit_date', 'gross_profit', 'trade_type']
DAILY_RETURN_COLUMNS = ['date', 'gross_profit']
REGIME_COLUMNS = ['date', 'direction', 'volatility']


def _read_csv(path: str, required: Iterable[str]) -> pd.DataFrame:
    df = pd.read_csv(path)
    df.columns = [c.strip().lower() for c in df.columns]

    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValidationError(f"{path}: missing columns {', '.join(missing)}")

    return df


def load_trades(path: str) -> List[Trade]:
    """Load closed trades, sorted by exit date."""
    df = _read_csv(path, TRADE_COLUMNS)
    df['entry_date'] = pd.to_datetime(df['entry_date'])
    df['exit_date'] = pd.to_datetime(df['exit_date'])
    df = df.sort_values('exit_date', kind='mergesort')

    trades = [
        Trade(
            entry_date=row.entry_date.to_pydatetime(),
            exit_date=row.exit_date.to_pydatetime(),
            gross_profit=float(row.gross_profit),
            trade_type=TradeType.parse(row.trade_type),
        )
        for row in df.itertuples(index=False)
    ]

    logger.info(f"Loaded {len(trades)} trades from {path}")
    return trades


def load_daily_returns(path: str) -> List[DailyReturn]:
    df = _read_csv(path, DAILY_RETURN_COLUMNS)
    df['date'] = pd.to_datetime(df['date']).dt.date

    returns = [DailyReturn(date=row.date, gross_profit=float(row.gross_profit)) for row in df.itertuples(index=False)]

    logger.info(f"Loaded {len(returns)} daily returns from {path}")
    return returns


def load_regimes(path: str) -> List[MarketRegime]:
    df = _read_csv(path, REGIME_COLUMNS)
    df['date'] = pd.to_datetime(df['date']).dt.date

    regimes = [
        MarketRegime(date=row.date, direction=int(row.direction), volatility=int(row.volatility))
        for row in df.itertuples(index=False)
    ]

    logger.info(f"Loaded {len(regimes)} market regimes from {path}")
    return regimes
