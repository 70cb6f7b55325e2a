from fastapi import APIRouter

from backend.app.api.v1.endpoints import (
    dashboard,
    expenses,
    reports,
    sales,
    stock,
    store,
)

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(stock.router, prefix="/stock", tags=["stock"])
api_router.include_router(sales.router, prefix="/sales", tags=["sales"])
api_router.include_router(expenses.router, prefix="/expenses", tags=["expenses"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
api_router.include_router(store.router, prefix="/store", tags=["store"])
