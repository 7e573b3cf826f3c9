from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from dotenv import load_dotenv
import logging

from app.core.config import settings
from app.api.v1.api import api_router

# Load environment variables
load_dotenv()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Configure audit logger (JSON lines)
audit_logger = logging.getLogger("audit")
if not audit_logger.handlers:
    handler = logging.StreamHandler()
    # Keep raw JSON line without extra prefixes
    handler.setFormatter(logging.Formatter("%(message)s"))
    audit_logger.addHandler(handler)
audit_logger.setLevel(logging.INFO)
# Do not propagate to root to avoid duplication
audit_logger.propagate = False

api_description = """
Backend for the SphereNet waitlist page.

- `POST /api/v1/waitlist` - join with an email and a role
- `GET /api/v1/waitlist/roles` - role choices for the signup form

Each client IP (stored only as a sha256 hash) can add a limited number of
signups per hour.
"""

app = FastAPI(
    title=settings.PROJECT_NAME,
    description=api_description,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# GZip compression for large JSON responses
app.add_middleware(GZipMiddleware, minimum_size=500)

# Set up CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

# Include API router
app.include_router(api_router, prefix="/api/v1")

@app.get("/")
async def root():
    return {"message": f"{settings.PROJECT_NAME} is running"}

@app.get("/health")
async def health_check():
    return {"status": "healthy"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
