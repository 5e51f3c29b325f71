import os
import uuid
import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from .db import engine, SessionLocal
from .models import Base, AdminUser
from .security.auth import get_password_hash
from .routes import auth, bookings, users, verification, heritage_sites, listings, wizards, translations, media
from .services.fanout import start_scheduler, shutdown_scheduler
from .services.storage import public_prefix, local_bucket_dir
from .logging_setup import setup_logging, request_id_var, log_event
from .config import settings

setup_logging()
logger = logging.getLogger(__name__)

if settings.secret_key == "change-me-in-production-for-jwt":
    logger.warning("CRITICAL STARTUP WARNING: JWT_SECRET is using the default insecure key")

app = FastAPI(title="Heritage Admin")
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    token = request_id_var.set(request.headers.get("X-Request-Id") or uuid.uuid4().hex)
    try:
        response = await call_next(request)
    finally:
        request_id_var.reset(token)
    return response

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"detail": f"Internal Server Error: {str(exc)}", "type": type(exc).__name__},
    )

@app.get("/health")
def health_check():
    return {"status": "ok"}

@app.get("/ready")
def readiness_check():
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1 FROM admin_users LIMIT 1"))
        return {"status": "ready"}
    except Exception:
        return JSONResponse(status_code=503, content={"status": "not_ready", "detail": "Database migrations pending or DB unreachable."})

# Local storage backend is served under the same public prefix as the bucket
os.makedirs(local_bucket_dir(), exist_ok=True)
app.mount(public_prefix().rstrip("/"), StaticFiles(directory=local_bucket_dir()), name="storage")

app.include_router(auth.router)
app.include_router(bookings.router)
app.include_router(users.router)
app.include_router(verification.router)
app.include_router(heritage_sites.router)
app.include_router(listings.router)
app.include_router(wizards.router)
app.include_router(translations.router)
app.include_router(media.router)

def bootstrap_superadmin():
    """Create the first superadmin from settings when none exists."""
    if not settings.superadmin_email or not settings.superadmin_password:
        return
    db = SessionLocal()
    try:
        if db.query(AdminUser).filter(AdminUser.role == "superadmin").first():
            return
        db.add(AdminUser(
            email=settings.superadmin_email,
            password_hash=get_password_hash(settings.superadmin_password),
            role="superadmin",
            is_active=True,
            name="Platform Superadmin",
        ))
        db.commit()
        log_event("superadmin_bootstrapped", email=settings.superadmin_email)
    except Exception as e:
        logger.error(f"Superadmin bootstrap failed: {e}")
        db.rollback()
    finally:
        db.close()

@app.on_event("startup")
def on_startup():
    Base.metadata.create_all(bind=engine)
    bootstrap_superadmin()
    start_scheduler()

@app.on_event("shutdown")
def on_shutdown():
    shutdown_scheduler()
