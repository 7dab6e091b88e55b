from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from app.core.config import configure_logging
from app.core.database import engine
from app.core.errors import LibraryError
from app.views.ddl import create_schema
from app.api import routes, view_routes

configure_logging()

@asynccontextmanager
async def lifespan(app: FastAPI):
    create_schema(engine)
    yield

app = FastAPI(title="Library Database", lifespan=lifespan)
app.include_router(routes.router)
app.include_router(view_routes.router)

@app.exception_handler(LibraryError)
async def library_error_handler(request: Request, exc: LibraryError):
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})

@app.get("/health")
def health():
    return {"status": "ok"}
