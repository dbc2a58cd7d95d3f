# main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from ballot_api.config import CORS_ORIGINS, HOST, LOG_LEVEL, PORT
from ballot_api.database import MongoConnector
from ballot_api.exceptions import BallotError, InternalError, PayloadValidationError
from ballot_api.routes.candidate_routes import router as candidate_router
from ballot_api.routes.vote_routes import vote_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting ballot API...")
    yield
    logger.info("Shutting down ballot API...")
    MongoConnector.close()


app = FastAPI(title="Ballot API - Candidates and Voting", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(candidate_router)
app.include_router(vote_router)


# ==============================================================================
# ERROR HANDLERS
# Every non-2xx response carries {"error": <message>}
# ==============================================================================

@app.exception_handler(BallotError)
async def ballot_error_handler(request: Request, exc: BallotError):
    body = {"error": exc.message}
    if isinstance(exc, PayloadValidationError) and exc.errors:
        body["details"] = exc.errors
    return JSONResponse(status_code=exc.status_code, content=body)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg")}
        for err in exc.errors()
    ]
    return await ballot_error_handler(request, PayloadValidationError("Invalid request data", details))


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


@app.exception_handler(PyMongoError)
async def database_error_handler(request: Request, exc: PyMongoError):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return await ballot_error_handler(request, InternalError())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc!r}")
    return await ballot_error_handler(request, InternalError())


# --- General Endpoints ---

@app.get("/health", tags=["Root"])
def health_check():
    return {"status": "healthy", "database": "MongoDB"}


@app.get("/", tags=["Root"])
def read_root():
    return {"message": "Welcome to the Ballot API"}


@app.get("/favicon.ico", include_in_schema=False)
async def favicon():
    return Response(status_code=204)


def run():
    import uvicorn

    uvicorn.run(
        "ballot_api.main:app",
        host=HOST,
        port=PORT,
        log_level=LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
