import os
import sys
import time
import logging

# Ensure this directory is in the path when launched from the repository root
current_dir = os.path.dirname(os.path.abspath(__file__))
if current_dir not in sys.path:
    sys.path.append(current_dir)

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from config import CORS_ORIGINS, LOG_LEVEL
from database import init_db
from routes.auth_routes import router as auth_router
from routes.book_routes import router as book_router
from routes.session_routes import router as session_router
from routes.collection_routes import router as collection_router
from routes.analytics_routes import router as analytics_router
from routes.ai_routes import router as ai_router
from routes.search_routes import router as search_router

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("readinghub")

init_db()

app = FastAPI(title="ReadingHub API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    # Browsers reject credentials with a wildcard origin
    allow_credentials="*" not in CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)")
    return response


@app.get("/api/v1/health-check")
async def health():
    return {"status": "ok", "message": "ReadingHub API is running"}


app.include_router(auth_router)
app.include_router(book_router)
app.include_router(session_router)
app.include_router(collection_router)
app.include_router(analytics_router)
app.include_router(ai_router)
app.include_router(search_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")), reload=True)
