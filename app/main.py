# /classroom-backend/app/main.py

import logging
import os

# --- Core FastAPI Imports ---
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

# --- Application-specific Router Imports ---
from .routers import classes_router, notifications_router

# --- Database Imports for Startup Logic ---
from .db.database import init_db

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# --- Application Lifecycle Management ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    # This code runs ONCE when the application starts up.
    init_db()
    logger.info("Database schema ready")
    yield
    # This code runs ONCE when the application shuts down.

# --- FastAPI Application Instance Creation ---
app = FastAPI(
    title="Classroom Matrix API",
    description="Classes, join requests and the attendance/marks/remarks matrix.",
    version="1.0.0",
    lifespan=lifespan
)

# --- Middleware Configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- API Router Inclusion ---
app.include_router(classes_router.router, prefix="/api/classes", tags=["Classes"])
app.include_router(notifications_router.router, prefix="/api/notifications", tags=["Notifications"])

# --- Root / Health Check Endpoint ---
@app.get("/", tags=["Health Check"])
async def read_root():
    """A simple health check endpoint to confirm the API is online."""
    return {"status": "Classroom Matrix API is running!", "version": app.version}
