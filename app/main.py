import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# ✅ Import All API Routes
from app.api.routes import auth, sessions, coach_config, health

from app.core import config
from app.core.errors import register_exception_handlers
from app.core.logging_config import setup_logging
from app.db.init_db import init_db

setup_logging(config.LOG_LEVEL, config.LOG_TO_FILE)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("MockAI API started")
    yield


# ============================================
# ✅ FASTAPI APP INIT
# ============================================

app = FastAPI(title="MockAI Interview API", lifespan=lifespan)

# ✅ CORS: only the configured frontends
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)

register_exception_handlers(app)


# ============================================
# ✅ REGISTER ALL ROUTERS
# ============================================

app.include_router(auth.router)
app.include_router(sessions.router)
app.include_router(coach_config.router)
app.include_router(health.router)


@app.get("/")
def root():
    return {"status": "MockAI API running"}
