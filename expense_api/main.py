# expense_api/main.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .auth import NotAuthenticated
from .db import Base, engine
from .expenses import router as expenses_router
from .log import configure_logging, log_request, logger
from .schemas import format_validation_errors

# ---------- App ----------
app = FastAPI(title="expense-api")
app.include_router(expenses_router)


@app.on_event("startup")
def on_startup():
    configure_logging()
    Base.metadata.create_all(bind=engine)


def _caller(request: Request):
    return getattr(request.state, "user_id", None)


# ---------- Health ----------
@app.get("/health")
def health():
    return {"ok": True}


# ---------- Errors ----------
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    log_request(request, _caller(request), ok=False, status=400)
    return JSONResponse(
        status_code=400,
        content={"message": "validation error", "errors": format_validation_errors(exc.errors())},
    )


@app.exception_handler(NotAuthenticated)
async def not_authenticated_handler(request: Request, exc: NotAuthenticated):
    log_request(request, None, ok=False, status=401)
    return JSONResponse(status_code=401, content={"message": "unauthorized"})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    # details go to the log only
    logger.exception("unhandled error", path=request.url.path)
    log_request(request, _caller(request), ok=False, status=500)
    return JSONResponse(status_code=500, content={"message": "internal server error"})
