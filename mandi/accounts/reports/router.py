from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from mandi.database import get_db
from mandi.accounts.reports import schemas, service
from mandi.accounts.balances import service as balance_service

router = APIRouter()


@router.get("/vendor-balances", response_model=List[schemas.VendorBalanceRow])
def vendor_balances(db: Session = Depends(get_db)):
    return balance_service.all_vendor_balances(db)


@router.get("/customer-balances", response_model=List[schemas.CustomerBalanceRow])
def customer_balances(db: Session = Depends(get_db)):
    return balance_service.all_customer_balances(db)


@router.get("/surcharge-summary", response_model=schemas.SurchargeSummaryOut)
def surcharge_summary(
    start_date: Optional[date] = Query(None, description="YYYY-MM-DD"),
    end_date: Optional[date] = Query(None, description="YYYY-MM-DD"),
    db: Session = Depends(get_db),
):
    return service.get_surcharge_summary(db, start_date, end_date)


@router.get("/daily", response_model=List[schemas.DailyRollupRow])
def daily_report(
    start_date: Optional[date] = Query(None, description="YYYY-MM-DD"),
    end_date: Optional[date] = Query(None, description="YYYY-MM-DD"),
    db: Session = Depends(get_db),
):
    """Day-wise sales and surcharge, newest first."""
    return service.get_daily_rollup(db, start_date, end_date)


@router.get("/monthly", response_model=List[schemas.MonthlyRollupRow])
def monthly_report(
    start_date: Optional[date] = Query(None, description="YYYY-MM-DD"),
    end_date: Optional[date] = Query(None, description="YYYY-MM-DD"),
    db: Session = Depends(get_db),
):
    return service.get_monthly_rollup(db, start_date, end_date)


@router.get("/stock-summary", response_model=schemas.StockSummaryOut)
def stock_summary(
    start_date: Optional[date] = Query(None, description="YYYY-MM-DD"),
    end_date: Optional[date] = Query(None, description="YYYY-MM-DD"),
    db: Session = Depends(get_db),
):
    return service.get_stock_summary(db, start_date, end_date)


@router.get("/dashboard", response_model=schemas.DashboardOut)
def dashboard(db: Session = Depends(get_db)):
    return service.get_dashboard(db)
