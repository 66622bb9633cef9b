import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

import config
from database import db, ensure_indexes, get_store
from errors import AppError, DatabaseError
from routes import ai, products, service_profiles, service_requests, users

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        ensure_indexes(db)
    except PyMongoError as e:
        # keep serving; storage failures surface per request as DatabaseError
        logger.error("Could not ensure indexes: %s", e)
    yield


app = FastAPI(title="Fixit API", version="1.0.0", lifespan=lifespan)

app.include_router(products.router)
app.include_router(service_profiles.router)
app.include_router(service_requests.router)
app.include_router(users.router)
app.include_router(ai.router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
def handle_app_error(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.get("/")
def home():
    return {"message": "Fixit API is live"}

@app.get("/health")
def health(store=Depends(get_store)):
    try:
        store.ping()
    except PyMongoError as e:
        raise DatabaseError("Database unreachable", operation="ping", retryable=True) from e
    return {"status": "ok", "environment": config.APP_ENV}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
