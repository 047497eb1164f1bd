# artify/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.middleware.sessions import SessionMiddleware

from artify.api.routes import admin as admin_router
from artify.api.routes import auth
from artify.api.routes import categories as categories_router
from artify.api.routes import posts as posts_router
from artify.api.routes import projects as projects_router
from artify.core.config import settings
from artify.core.errors import AppError, FieldErrorResponse, ValidationError
from artify.core.logger import configure_logging, kv
from artify.core.security import DAY_SECONDS
from artify.db.base import Base, engine
from artify.db.models import registry  # noqa: F401

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Artify Marketplace")

# signed session cookie; per-session expiry (7 or 30 days) is enforced in
# artify.core.security, the cookie max_age is only the outer bound
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret,
    session_cookie=settings.session_cookie,
    max_age=settings.session_remember_days * DAY_SECONDS,
    same_site="lax",
    https_only=settings.session_https_only,
)


@app.on_event("startup")
def startup():
    Base.metadata.create_all(bind=engine)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if isinstance(exc, ValidationError):
        logger.info(kv("request.invalid", path=request.url.path, fields=sorted(exc.field_errors)))
    else:
        logger.info(kv("request.rejected", path=request.url.path, code=exc.code, message=exc.message))
    return JSONResponse(status_code=exc.http_status, content=exc.to_response().model_dump())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    field_errors = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "body"
        field_errors.setdefault(field, err.get("msg", "Invalid value"))
    logger.info(kv("request.invalid", path=request.url.path, fields=sorted(field_errors)))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=FieldErrorResponse(fieldErrors=field_errors).model_dump(),
    )


@app.get("/")
def root():
    return {"message": "Artify Marketplace API running"}


app.include_router(auth.router, prefix="/api/auth")
app.include_router(categories_router.router)
app.include_router(admin_router.router)
app.include_router(posts_router.router)
app.include_router(projects_router.router)
