from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
import os
from pathlib import Path

from family_tasks import __version__
from family_tasks.database import engine, SessionLocal, Base
from family_tasks import models  # noqa: F401  registers all models with Base
from family_tasks.auto_migrate import auto_migrate
from family_tasks.exceptions import FamilyTasksException
from family_tasks.routes import auth_routes, users, tasks, interactions
from family_tasks.services.user_service import UserService
from family_tasks.services.scheduler_service import start_scheduler, stop_scheduler
from family_tasks.constants import (
    DEFAULT_LOG_DIRECTORY_PROD, DEFAULT_LOG_DIRECTORY_DEV, CORS_ALLOWED_ORIGINS
)

LOG_DIR = os.getenv("FAMILY_TASKS_LOG_DIR", DEFAULT_LOG_DIRECTORY_PROD)
LOG_FILE = os.getenv("FAMILY_TASKS_LOG_FILE", "app.log")

try:
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE
except PermissionError:
    # No access to /var/log outside production
    LOG_DIR = DEFAULT_LOG_DIRECTORY_DEV
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(log_path),
        logging.StreamHandler()
    ]
)

logger = logging.getLogger("family_tasks")

Base.metadata.create_all(bind=engine)

# Add columns introduced since the database was created
try:
    auto_migrate()
except Exception as e:
    logger.error(f"Auto-migration failed: {e}")

app = FastAPI(
    title="Family Tasks API",
    description="Family task tracker with AI-graded answers, points and daily streaks",
    version=__version__
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_routes.router)
app.include_router(users.router)
app.include_router(tasks.router)
app.include_router(interactions.router)


@app.exception_handler(FamilyTasksException)
async def family_tasks_exception_handler(request: Request, exc: FamilyTasksException):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})


@app.on_event("startup")
async def startup_event():
    logger.info(f"Family Tasks API started. Logging to: {log_path}")
    db = SessionLocal()
    try:
        UserService(db).ensure_initial_admin()
    finally:
        db.close()
    start_scheduler()


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down Family Tasks API")
    stop_scheduler()


@app.get("/")
async def root():
    return {"message": "Family Tasks API", "status": "active"}
