# eom/main.py
import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import exc as sa_exc
from eom.database import engine, Base
from eom.core.errors import ValidationError, NotFoundError, ForbiddenError, StoreError
from eom.models import employee, rating, evaluation, winner, period_settings, participation  # noqa: F401 (register tables)
from eom.routers import evaluations, leaderboard, winners, periods

app = FastAPI(title="EOM - Employee of the Month Scoring Engine", version="1.0")

# Include Routers
app.include_router(evaluations.router)
app.include_router(leaderboard.router)
app.include_router(winners.router)
app.include_router(periods.router)

@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content={"detail": exc.message, "field": exc.field})

@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})

@app.exception_handler(ForbiddenError)
async def forbidden_handler(request: Request, exc: ForbiddenError):
    return JSONResponse(status_code=403, content={"detail": str(exc)})

@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    return JSONResponse(status_code=503, content={"detail": str(exc)})

# Create DB Tables (demo only; use Alembic in prod)
@app.on_event("startup")
async def startup_event():
    # create tables (async). ignore duplicate-object errors from previous partial runs.
    async with engine.begin() as conn:
        try:
            await conn.run_sync(Base.metadata.create_all)
        except sa_exc.IntegrityError as e:
            msg = str(getattr(e, "orig", e))
            if "duplicate key value violates unique constraint" in msg or "already exists" in msg:
                logging.warning("Ignored duplicate DDL error during create_all: %s", msg)
            else:
                raise

@app.get("/")
def read_root():
    return {"message": "Welcome to the Employee of the Month scoring engine"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("eom.main:app", host="0.0.0.0", port=8000, reload=True)
