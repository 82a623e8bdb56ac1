from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.bootstrap import init_db
from app.core.database import engine
from app.core.errors import StorageError
from app.core.logging_config import setup_logging
from app.api import routes

logger = setup_logging()

@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db(engine)
    logger.info("Library service ready")
    yield
    engine.dispose()

app = FastAPI(title="Library Service", lifespan=lifespan)
app.include_router(routes.router)

@app.exception_handler(RequestValidationError)
async def bad_request_handler(request: Request, exc: RequestValidationError):
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else err.get("msg", ""))
    return JSONResponse(status_code=400, content={"detail": "; ".join(parts)})

@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    return JSONResponse(status_code=500, content={"detail": exc.message})

@app.get("/health")
def health():
    return {"status": "ok"}
