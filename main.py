"""
FastAPI Main Application

This script mounts the empathy routes and runs the FastAPI server on port 8000.
"""

from fastapi import FastAPI
from dotenv import load_dotenv
import uvicorn
import logging

# Load provider credentials before the routers read them
load_dotenv()

from empathy import api as empathy_api

# Setup logging with timestamps
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger(__name__)

# Create FastAPI app instance
app = FastAPI(
    title="Empathy Recommendation API",
    description="Mood analysis and personalized recommendations",
    version="1.0.0"
)

app.include_router(empathy_api.router)


@app.get("/")
async def root():
    """Root endpoint."""
    logger.info("GET / - Root endpoint called")
    return {"message": "Empathy Recommendation API is running"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    logger.info("GET /health - Health check endpoint called")
    return {"status": "healthy"}


if __name__ == "__main__":
    # Run the server on port 8000
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
