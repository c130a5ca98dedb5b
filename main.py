import os
import logging
from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from config.settings import settings
from service import router as tasks_router
from routes.auth import router as auth_router
from routes.nextdate import router as nextdate_router
from database import create_tables
from limiter import limiter
from logging_config import configure_logging
from utils.body_limit import BodySizeLimitMiddleware
from utils.error_handler import register_exception_handlers

configure_logging()
logger = logging.getLogger("app")

app = FastAPI(title="go-todo scheduler")
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
register_exception_handlers(app)

@app.middleware("http")
async def log_requests(request: Request, call_next):
    client = request.client.host if request.client else "unknown"
    logger.info(f"Request: {request.method} {request.url} from {client}")
    response = await call_next(request)
    logger.info(f"Response status: {response.status_code}")
    return response

app.add_middleware(BodySizeLimitMiddleware, settings=settings)

@app.on_event("startup")
async def on_startup():
    create_tables()
    logger.info(f"Scheduler started on {settings.HOST}:{settings.PORT}")

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "service": "go-todo"}

app.include_router(auth_router, prefix="/api")
app.include_router(nextdate_router, prefix="/api")
app.include_router(tasks_router, prefix="/api")

# Front-end assets; mounted last so /api routes take precedence
if os.path.isdir(settings.WEB_DIR):
    app.mount("/", StaticFiles(directory=settings.WEB_DIR, html=True), name="web")
else:
    logger.warning(f"Web directory '{settings.WEB_DIR}' not found, static files are not served")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
