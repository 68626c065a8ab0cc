from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import salon.models  # noqa: F401  registers tables on Base.metadata
from salon.config import settings
from salon.db import Base, engine
from salon.middleware import RequestIdMiddleware
from salon.routers import catalog, clients, finance, ledger, reports, staff
from salon.util.errors import InvalidInput, NotFound
from salon.util.log import configure_logging

configure_logging(settings.LOG_LEVEL)

app = FastAPI(title="Salon Admin API", version="0.1.0")

@app.on_event("startup")
def init_db():
    Base.metadata.create_all(bind=engine)

@app.exception_handler(InvalidInput)
async def invalid_input(request: Request, exc: InvalidInput):
    return JSONResponse(status_code=400, content={"detail": str(exc)})

@app.exception_handler(NotFound)
async def not_found(request: Request, exc: NotFound):
    return JSONResponse(status_code=404, content={"detail": str(exc)})

# Middlewares
app.add_middleware(RequestIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(catalog.router)
app.include_router(staff.router)
app.include_router(clients.router)
app.include_router(ledger.router)
app.include_router(reports.router)
app.include_router(finance.router)

@app.get("/healthz")
def healthz():
    return {"ok": True}
