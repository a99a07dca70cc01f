from fastapi import FastAPI
from salon_backend.fastapi.api.v1.endpoints import base, time_entry, payroll, advance

def setup_routers(app: FastAPI):
    # Main routes
    app.include_router(base.router, prefix="", tags=["main"])

    # Attendance ledger routes
    app.include_router(time_entry.router, prefix="/api/v1/attendance", tags=["attendance"])

    # Payroll routes
    app.include_router(payroll.router, prefix="/api/v1/payroll", tags=["payroll"])

    # Advance payment routes
    app.include_router(advance.router, prefix="/api/v1/advances", tags=["advances"])
