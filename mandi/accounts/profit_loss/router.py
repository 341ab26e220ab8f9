from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from datetime import date

from mandi.database import get_db
from mandi.accounts.profit_loss import service
from mandi.accounts.reports import schemas


router = APIRouter()


@router.get("/profit-loss", response_model=schemas.ProfitLossOut)
def get_profit_loss(
    start_date: date = Query(None, description="Start date for P&L period"),
    end_date: date = Query(None, description="End date for P&L period"),
    db: Session = Depends(get_db),
):
    """
    Profit & Loss report.
    Gross profit is sales less purchases net of vendor returns.
    """
    return service.get_profit_and_loss(db, start_date, end_date)
