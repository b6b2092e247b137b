"""Service for the market indices a portfolio is compared against."""

import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from models import Benchmark
from models.utils import utcnow
from services.portfolio_service import get_portfolio_or_404
from services.price_service import PriceService, normalize_symbol

logger = logging.getLogger(__name__)


class BenchmarkService:
    """Add, list, remove and re-price a portfolio's benchmarks.

    Values come from :meth:`PriceService.fetch_benchmark`. A failed lookup
    never blocks the operation; the benchmark keeps its previous (possibly
    null) values.
    """

    def __init__(self, price_service: PriceService):
        self._price_service = price_service

    def _query(self, db: Session, portfolio_id: str):
        return db.query(Benchmark).filter(Benchmark.portfolio_id == portfolio_id)

    def _update_value(self, benchmark: Benchmark) -> bool:
        """Fetch and store the latest value. Returns False if the lookup failed."""
        try:
            data = self._price_service.fetch_benchmark(benchmark.symbol)
        except Exception as e:
            logger.warning("Could not fetch value for benchmark %s: %s", benchmark.symbol, e)
            return False
        benchmark.current_value = data.value
        benchmark.change_amount = data.change_amount
        benchmark.change_percentage = data.change_percentage
        benchmark.last_updated = utcnow()
        return True

    def get_item(self, db: Session, portfolio_id: str, benchmark_id: str) -> Benchmark:
        """Fetch a benchmark, 404 unless it belongs to ``portfolio_id``."""
        benchmark = self._query(db, portfolio_id).filter(Benchmark.id == benchmark_id).first()
        if not benchmark:
            raise HTTPException(status_code=404, detail="Benchmark not found")
        return benchmark

    def list(self, db: Session, portfolio_id: str) -> List[Benchmark]:
        get_portfolio_or_404(db, portfolio_id)
        return self._query(db, portfolio_id).order_by(Benchmark.added_at).all()

    def add(
        self,
        db: Session,
        portfolio_id: str,
        symbol: str,
        name: Optional[str] = None,
        index_type: Optional[str] = None,
        description: Optional[str] = None,
        currency: str = "USD",
    ) -> Benchmark:
        """Track ``symbol`` for a portfolio and look up its current value.

        Raises:
            HTTPException: 404 if the portfolio doesn't exist, 400 for a
                blank symbol, 409 if the symbol is already tracked.
        """
        portfolio = get_portfolio_or_404(db, portfolio_id)
        try:
            symbol = normalize_symbol(symbol)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        if self._query(db, portfolio_id).filter(Benchmark.symbol == symbol).first():
            raise HTTPException(
                status_code=409,
                detail=f"Benchmark {symbol} already exists for this portfolio",
            )

        benchmark = Benchmark(
            symbol=symbol,
            name=name or symbol,
            index_type=index_type.upper() if index_type else None,
            description=description,
            currency=(currency or "USD").upper(),
        )
        self._update_value(benchmark)
        portfolio.benchmarks.append(benchmark)
        db.flush()
        logger.info("Added benchmark %s to portfolio %s", symbol, portfolio_id)
        return benchmark

    def remove(self, db: Session, portfolio_id: str, benchmark_id: str) -> None:
        benchmark = self.get_item(db, portfolio_id, benchmark_id)
        db.delete(benchmark)
        db.flush()
        logger.info("Removed benchmark %s from portfolio %s", benchmark.symbol, portfolio_id)

    def refresh(self, db: Session, portfolio_id: str) -> List[Benchmark]:
        """Re-price every benchmark of a portfolio, one at a time."""
        benchmarks = self.list(db, portfolio_id)
        failed = [b.symbol for b in benchmarks if not self._update_value(b)]
        db.flush()
        logger.info(
            "Refreshed %d/%d benchmarks for portfolio %s",
            len(benchmarks) - len(failed), len(benchmarks), portfolio_id,
        )
        return benchmarks
