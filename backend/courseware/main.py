from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from courseware.core.config import get_settings
from courseware.core.logging_config import configure_logging
from courseware.routers import models, quiz, rag


settings = get_settings()

configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Shutdown: release pooled database connections
    from courseware.core.database import engine
    await engine.dispose()


app = FastAPI(
    title="Courseware Core API",
    description="Semantic search over course material and validated quiz generation",
    version="1.0.0",
    lifespan=lifespan,
)
# Avoid 307 redirects for trailing slash (e.g. /models/ -> /models) that can cause redirect loops behind nginx
app.router.redirect_slashes = False

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        settings.frontend_url,
        "http://localhost:5173",
        "http://localhost",
        "http://127.0.0.1",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(rag.router, prefix="/rag", tags=["RAG"])
app.include_router(quiz.router, prefix="/quiz", tags=["Quiz"])
app.include_router(models.router, prefix="/models", tags=["Models"])


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
