"""Benchmark (comparison index) API endpoints."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.helpers import get_benchmark_service
from database import get_db
from schemas.benchmark import BenchmarkCreate, BenchmarkResponse
from services.benchmark_service import BenchmarkService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/portfolios/{portfolio_id}/benchmarks", tags=["benchmarks"])


@router.get("", response_model=list[BenchmarkResponse])
def list_benchmarks(
    portfolio_id: str,
    db: Session = Depends(get_db),
    service: BenchmarkService = Depends(get_benchmark_service),
):
    return service.list(db, portfolio_id)


@router.post("", response_model=BenchmarkResponse, status_code=201)
def add_benchmark(
    portfolio_id: str,
    data: BenchmarkCreate,
    db: Session = Depends(get_db),
    service: BenchmarkService = Depends(get_benchmark_service),
):
    """
    Track an index for this portfolio.

    Returns 409 if the symbol is already tracked. The value is looked up
    immediately; if that fails the benchmark is still added.
    """
    benchmark = service.add(
        db,
        portfolio_id,
        data.symbol,
        name=data.name,
        index_type=data.index_type,
        description=data.description,
        currency=data.currency,
    )
    db.commit()
    db.refresh(benchmark)
    return benchmark


@router.post("/refresh", response_model=list[BenchmarkResponse])
def refresh_benchmarks(
    portfolio_id: str,
    db: Session = Depends(get_db),
    service: BenchmarkService = Depends(get_benchmark_service),
):
    benchmarks = service.refresh(db, portfolio_id)
    db.commit()
    return benchmarks


@router.delete("/{benchmark_id}", status_code=204)
def delete_benchmark(
    portfolio_id: str,
    benchmark_id: str,
    db: Session = Depends(get_db),
    service: BenchmarkService = Depends(get_benchmark_service),
):
    service.remove(db, portfolio_id, benchmark_id)
    db.commit()
