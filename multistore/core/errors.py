import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

async def integrity_error_handler(request: Request, exc: IntegrityError):
    logging.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
    return JSONResponse(
        status_code=400,
        content={"detail": "Duplicate value or invalid reference"},
    )

def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(IntegrityError, integrity_error_handler)
