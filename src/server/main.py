import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from src.server.db.session import init_db
from src.server.api import (
    admin,
    bom,
    customers,
    equipment,
    materials,
    pricing,
    quotes,
    sales_orders,
    settings as settings_api,
    system,
    system_materials,
)
from src.server.settings.config import settings
from src.services.errors import ServiceError


@asynccontextmanager
async def lifespan(app: FastAPI):
    print("[app] Initializing database...", file=sys.stderr)
    init_db()
    yield
    print("[app] Shutting down...", file=sys.stderr)


app = FastAPI(title=settings.app_name, lifespan=lifespan)

# CORS for the quote builder frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ==============================
# ERROR ENVELOPE
# ==============================

@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    return JSONResponse(status_code=exc.status_code, content={"ok": False, "error": exc.message})


@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"ok": False, "error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={"ok": False, "error": "Invalid request", "detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    print(f"[app] Unhandled error on {request.method} {request.url.path}: {exc!r}", file=sys.stderr)
    return JSONResponse(
        status_code=500,
        content={"ok": False, "error": "Internal server error", "detail": str(exc)},
    )


# Routers (customers before quotes: "/api/quotes/customers" must not hit "/{quote_id}")
app.include_router(system.router)
app.include_router(customers.router)
app.include_router(quotes.router)
app.include_router(bom.router)
app.include_router(materials.router)
app.include_router(sales_orders.router)
app.include_router(settings_api.router)
app.include_router(admin.router)
app.include_router(pricing.router)
app.include_router(equipment.router)
app.include_router(system_materials.router)
