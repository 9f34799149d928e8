from dotenv import load_dotenv

# Settings are read at import time, so .env must be loaded first
load_dotenv()

from fastapi import FastAPI  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

from chromalab.api.v1 import router as v1_router  # noqa: E402
from chromalab.config import config  # noqa: E402
from chromalab.services.colors import __version__  # noqa: E402
from chromalab.utils.logging import get_logger  # noqa: E402

logger = get_logger()

app = FastAPI(
    title="ChromaLab Color Engine",
    description="Color conversion, naming, contrast, palette extraction, brand analysis, "
                "gradient maps and design tokens",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins() or ["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)

app.include_router(v1_router)


@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": "ChromaLab Color Engine API",
        "version": __version__,
        "docs": "/docs",
    }


logger.info("ChromaLab API ready", extra={"log_level": config.LOG_LEVEL, "max_edge": config.MAX_EDGE})
