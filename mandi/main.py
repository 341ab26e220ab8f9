import sys
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

# Find .env even in frozen or packaged mode
POSSIBLE_ENV_PATHS = [
    Path(__file__).resolve().parent.parent / ".env",        # normal
    Path(sys.executable).resolve().parent / ".env",         # frozen exe
    Path.cwd() / ".env",                                   # runtime cwd
]

for env_path in POSSIBLE_ENV_PATHS:
    if env_path.exists():
        load_dotenv(env_path, override=True)
        break

from mandi.config import settings  # reads the environment loaded above
from mandi.database import engine, Base

from mandi.vendor.router import router as vendor_router
from mandi.customer.router import router as customer_router
from mandi.vehicle.router import router as vehicle_router
from mandi.stock.products.router import router as product_router
from mandi.stock.movements.router import router as movement_router
from mandi.stock.vehicle_inventory.router import router as vehicle_inventory_router
from mandi.purchase.router import router as purchase_router
from mandi.purchase.returns.router import router as vendor_return_router
from mandi.invoice.router import router as invoice_router
from mandi.payments.router import router as payment_router
from mandi.accounts.profit_loss.router import router as profit_loss_router
from mandi.accounts.reports.router import router as reports_router
from mandi.company.router import router as company_router


if settings.LOG_FILE:
    logger.add(settings.LOG_FILE, rotation="500 MB", level=settings.LOG_LEVEL)


# Database startup
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application startup")
    Base.metadata.create_all(bind=engine)
    yield
    logger.info("Application shutdown")


# Create app
app = FastAPI(
    title="MANDI APP",
    description="An API for managing a wholesale produce market: vendors, customers, vehicles, stock, invoices, and payments.",
    version="1.0.0",
    lifespan=lifespan
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # For production, change to specific domains
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Routers
app.include_router(vendor_router, prefix="/vendor", tags=["Vendor"])
app.include_router(customer_router, prefix="/customer", tags=["Customer"])
app.include_router(vehicle_router, prefix="/vehicle", tags=["Vehicle"])
app.include_router(product_router, prefix="/stock/products", tags=["Stock - Products"])
app.include_router(movement_router, prefix="/stock/movements", tags=["Stock - Movements"])
app.include_router(vehicle_inventory_router, prefix="/stock/vehicle-inventory", tags=["Stock - Vehicle Inventory"])
# Returns first, so /purchase/returns is not taken for a purchase id
app.include_router(vendor_return_router, prefix="/purchase/returns", tags=["Purchase - Returns"])
app.include_router(purchase_router, prefix="/purchase", tags=["Purchase"])
app.include_router(invoice_router, prefix="/invoice", tags=["Invoice"])
app.include_router(payment_router, prefix="/payments", tags=["Payments"])
app.include_router(profit_loss_router, prefix="/reports", tags=["Reports - Profit-Loss"])
app.include_router(reports_router, prefix="/reports", tags=["Reports"])
app.include_router(company_router, prefix="/company-settings", tags=["Company Settings"])


@app.get("/health")
def health_check():
    return {"status": "ok"}


if __name__ == "__main__":
    uvicorn.run("mandi.main:app", host=settings.SERVER_IP, port=settings.SERVER_PORT)
