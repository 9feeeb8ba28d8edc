import argparse
import logging
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

import sys
from pathlib import Path

# Add project root to path for package imports
base_dir = Path(__file__).parent
sys.path.insert(0, str(base_dir))

from db.database import init_db, get_conn
from config import load_config
from routes import sentences, words, review  # Import routers
from utils.errors import (
    ConflictError,
    NotFoundError,
    StorageError,
    TokenizationError,
    ValidationError,
    WordmineError,
)
from utils.ingest import retokenize
from utils.tokenizer import get_tokenizer

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ValidationError: 400,
    NotFoundError: 404,
    ConflictError: 409,
    TokenizationError: 502,
    StorageError: 503,
}

def configure_logging(config: dict) -> None:
    logging.basicConfig(
        level=config.get("logging", {}).get("level", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

# First-run init
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: init DB and config
    configure_logging(load_config())  # Ensures config exists
    init_db()
    yield

app = FastAPI(title="wordmine", description="Sentence-mined vocabulary with SM-2 reviews", lifespan=lifespan)

# Include routers
app.include_router(sentences.router, prefix="/sentences", tags=["sentences"])
app.include_router(words.router, prefix="/words", tags=["words"])
app.include_router(review.router, prefix="/review", tags=["review"])

@app.exception_handler(WordmineError)
async def wordmine_error_handler(request: Request, exc: WordmineError):
    status_code = next(
        (code for error_type, code in ERROR_STATUS.items() if isinstance(exc, error_type)),
        500,
    )
    if status_code >= 500:
        logger.error("%s %s failed: %s: %s", request.method, request.url.path, type(exc).__name__, exc)
    return JSONResponse(
        status_code=status_code,
        content={"error": {"type": type(exc).__name__, "message": str(exc)}},
    )

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="wordmine")
    parser.add_argument("--init", action="store_true", help="Initialize DB and config")
    parser.add_argument("--dev", action="store_true", help="Run in dev mode with reload")
    parser.add_argument("--retokenize", action="store_true", help="Re-tokenize every stored sentence before serving")
    args = parser.parse_args()
    config = load_config()  # Ensures config is copied if missing
    configure_logging(config)
    init_db()
    if args.init:
        print("DB initialized and config copied to ~/.wordmine/")
        exit(0)
    if args.retokenize:
        with get_conn() as conn:
            retokenize(conn, get_tokenizer(config))
    # Run server
    server = config["server"]
    uvicorn.run("main:app", host=server["host"], port=server["port"], reload=args.dev, log_level="info")
