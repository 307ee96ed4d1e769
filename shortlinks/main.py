import logging
import os
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError

from shortlinks import __version__, crud, database, schemas
from shortlinks.errors import LinkError

ENVIRONMENT = os.getenv("ENVIRONMENT", "dev")
STARTED_AT = time.monotonic()

# --- Logging ---
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
)
logger = logging.getLogger("shortlinks")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Fails startup when DATABASE_URL is missing or the store is unreachable
    database.init_db()
    yield
    database.dispose()


app = FastAPI(
    title="Short Links",
    description="Short alphanumeric codes that redirect to target URLs, with click tracking.",
    version=__version__,
    lifespan=lifespan,
)

# --- CORS (allow frontend dev servers, etc.) ---
origins = ["*"] if ENVIRONMENT == "dev" else [
    os.getenv("PUBLIC_BASE_URL", "http://localhost:8000"),
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------- Errors ----------
@app.exception_handler(LinkError)
async def link_error_handler(request: Request, exc: LinkError):
    if exc.status_code >= 500:
        logger.error("%s on %s %s", exc.message, request.method, request.url.path)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Store error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})

@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})

@app.exception_handler(RequestValidationError)
async def bad_body_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"detail": "Invalid request body"})

# Liveness probe; does not touch the store
@app.get("/healthz", response_model=schemas.HealthOut)
def healthz():
    return {"ok": True, "version": __version__, "uptime": time.monotonic() - STARTED_AT}

# ---------- API ----------
ERROR_RESPONSES = {
    400: {"model": schemas.ErrorOut},
    404: {"model": schemas.ErrorOut},
    409: {"model": schemas.ErrorOut},
    500: {"model": schemas.ErrorOut},
}

@app.get("/api/links", response_model=list[schemas.LinkOut], responses=ERROR_RESPONSES)
def list_links(search: str | None = Query(None), db=Depends(database.get_db)):
    return crud.list_links(db, search)

@app.post(
    "/api/links",
    response_model=schemas.LinkOut,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
def create_link(link_in: schemas.LinkCreate, db=Depends(database.get_db)):
    logger.info("Creating link: code=%s target=%s", link_in.code, link_in.target_url)
    return crud.create_link(db, link_in)

@app.get("/api/links/{code}", response_model=schemas.LinkOut, responses=ERROR_RESPONSES)
def get_link(code: str, db=Depends(database.get_db)):
    return crud.get_link(db, code)

@app.delete("/api/links/{code}", response_model=schemas.DeleteOut, responses=ERROR_RESPONSES)
def delete_link(code: str, db=Depends(database.get_db)):
    crud.delete_link(db, code)
    return {"success": True}

# Redirect /{code}; declared last so the fixed paths above win
@app.get("/{code}", include_in_schema=False)
def redirect(code: str, db=Depends(database.get_db)):
    if code in crud.RESERVED:
        raise HTTPException(status_code=404, detail="Not found")
    target_url = crud.redirect_and_track(db, code)
    logger.info("Redirecting %s -> %s", code, target_url)
    return RedirectResponse(url=target_url, status_code=status.HTTP_302_FOUND)
