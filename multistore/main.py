from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from starlette.middleware.cors import CORSMiddleware
from pathlib import Path
import logging
from dotenv import load_dotenv
import uvicorn

# Load env variables
ROOT_DIR = Path(__file__).resolve().parent.parent
load_dotenv(ROOT_DIR / '.env')

from multistore.api.v1.api import api_router
from multistore.api.v1.endpoints.auth import seed_super_admins
from multistore.core.config import settings
from multistore.core.errors import register_exception_handlers
from multistore.db.base import Base
from multistore.db.session import engine, SessionLocal

# Import all models to ensure they are registered with Base.metadata
from multistore.models import user, vendor, product, order

logging.basicConfig(level=settings.LOG_LEVEL)

# Create Tables
Base.metadata.create_all(bind=engine)

with SessionLocal() as db:
    seed_super_admins(db)

app = FastAPI(title="Multistore API")

# Mount static files
settings.UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=str(settings.UPLOAD_DIR)), name="uploads")

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(api_router, prefix="/api")

@app.get("/")
def root():
    return {"message": "Multistore API", "version": "1.0.0"}

if __name__ == "__main__":
    uvicorn.run(app, host="127.0.0.1", port=8000)
