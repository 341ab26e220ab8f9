from pydantic import BaseModel
from datetime import date as date_type
from typing import List, Literal, Optional


# -------------------------
# Balances
# -------------------------
class VendorBalanceRow(BaseModel):
    vendor_id: int
    vendor_name: str
    total_purchases: float
    total_payments: float
    total_returns: float
    balance: float


class CustomerBalanceRow(BaseModel):
    customer_id: int
    customer_name: str
    total_invoiced: float
    total_payments: float
    balance: float
    payment_status: Literal["paid", "partial", "unpaid"]


# -------------------------
# Profit & loss
# -------------------------
class ReportPeriod(BaseModel):
    start_date: Optional[date_type] = None
    end_date: Optional[date_type] = None


class ProductProfit(BaseModel):
    id: int
    name: str
    purchase_price: float
    sale_price: float
    margin: float
    margin_percent: Optional[float] = None


class ProfitLossOut(BaseModel):
    period: ReportPeriod
    total_sales: float
    total_purchases: float
    total_returns: float
    net_purchases: float
    gross_profit: float
    product_profits: List[ProductProfit]


# -------------------------
# Surcharge
# -------------------------
class SurchargeSummaryOut(BaseModel):
    invoice_surcharge_total: float
    cash_surcharge_total: float
    total_surcharge_collected: float
    invoices_with_surcharge: int
    invoices_without_surcharge: int
    invoice_count: int
    total_sales: float
    total_subtotal: float


# -------------------------
# Rollups
# -------------------------
class RollupBase(BaseModel):
    sales: float
    invoice_count: int
    surcharge_from_invoices: float
    surcharge_cash: float
    total_surcharge: float


class DailyRollupRow(RollupBase):
    date: date_type


class MonthlyRollupRow(RollupBase):
    month: str              # YYYY-MM
    month_label: str        # October 2026


# -------------------------
# Stock
# -------------------------
class LowStockProduct(BaseModel):
    id: int
    name: str
    unit: str
    current_stock: float
    reorder_level: Optional[float] = None

    class Config:
        from_attributes = True


class StockSummaryOut(BaseModel):
    stock_in_total: float
    stock_out_total: float
    product_count: int
    low_stock_count: int
    low_stock_products: List[LowStockProduct]
    total_stock_value: float


# -------------------------
# Dashboard
# -------------------------
class DashboardOut(BaseModel):
    date: date_type
    today_sales: float
    today_invoice_count: int
    total_stock_value: float
    low_stock_count: int
    total_receivable: float
    total_payable: float
    vendor_count: int
    customer_count: int
