import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import config
from .controllers import budgets, categories, export, reports, transactions, users
from .database import engine, Base
from .errors import FinanceError

logging.basicConfig(level=config.log_level())
logger = logging.getLogger(__name__)

STARTED_AT = time.monotonic()

app = FastAPI(title="Finance Management API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(FinanceError)
async def handle_finance_error(request: Request, exc: FinanceError):
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


# Create database tables
Base.metadata.create_all(bind=engine)

# Include routers
app.include_router(categories.router, prefix="/api/categories", tags=["categories"])
app.include_router(transactions.router, prefix="/api/transactions", tags=["transactions"])
app.include_router(budgets.router, prefix="/api/budgets", tags=["budgets"])
app.include_router(reports.router, prefix="/api/reports", tags=["reports"])
app.include_router(export.router, prefix="/api/export", tags=["export"])
app.include_router(users.router, prefix="/api/users", tags=["users"])


@app.get("/", summary="API info")
def api_info():
    return {
        "name": app.title,
        "version": app.version,
        "status": "running",
        "endpoints": {
            "users": "/api/users",
            "categories": "/api/categories",
            "transactions": "/api/transactions",
            "budgets": "/api/budgets",
            "reports": "/api/reports",
            "export": "/api/export",
        },
        "documentation": app.docs_url,
        "health": "/health",
    }


@app.get("/health", summary="Health check")
def health():
    return {"status": "ok", "uptime": round(time.monotonic() - STARTED_AT, 3)}
