import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from receipt_engine.config import settings

logging.basicConfig(level=logging.DEBUG if settings.DEBUG else settings.LOG_LEVEL)

app = FastAPI(
    title=settings.APP_NAME,
    description="Receipt field extraction from OCR text",
    version="0.1.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["POST"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)

@app.get("/")
async def root():
    return {
        "message": settings.APP_NAME,
        "version": "0.1.0",
        "status": "running"
    }

@app.get("/health")
async def health_check():
    return {"status": "healthy"}

# Import routers
from receipt_engine.routers import extract

# Include routers
app.include_router(extract.router)
