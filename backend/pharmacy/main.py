"""
Pharmacy Management API.

ARCHITECTURE:
- Angular SPA: forms, tables and charts (separate project)
- FastAPI backend: role-gated CRUD, stock adjustment, reporting
- SQL database via SQLAlchemy: source of truth for all state

ROLES:
- Admin: users, catalog, reports, exports
- Pharmacist: counter sales, purchase receipt, inventory alerts
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pharmacy.api.routes import auth, inventory, medicines, purchases, reports, sales, users
from pharmacy.core.config import settings
from pharmacy.core.exceptions import PharmacyError
from pharmacy.db.init_db import init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and the default admin on startup."""
    print("[*] Initializing database...")
    init_db()
    print("[OK] Database initialized")
    yield


app = FastAPI(
    title="Pharmacy Management API",
    description="Medicines, sales, purchases, stock alerts and reports.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept", "Origin"],
    max_age=600,
    expose_headers=["Content-Type", "Content-Disposition"],
)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


@app.exception_handler(PharmacyError)
async def pharmacy_error_handler(request: Request, exc: PharmacyError):
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.code, "detail": exc.message},
    )


app.include_router(auth.router, prefix="/auth", tags=["auth"])
app.include_router(users.router, prefix="/users", tags=["users"])
app.include_router(medicines.router, prefix="/medicines", tags=["medicines"])
app.include_router(inventory.router, prefix="/inventory", tags=["inventory"])
app.include_router(sales.router, prefix="/sales", tags=["sales"])
app.include_router(purchases.router, prefix="/purchases", tags=["purchases"])
app.include_router(reports.router, prefix="/reports", tags=["reports"])


@app.get("/health")
def health():
    return {"status": "ok"}
