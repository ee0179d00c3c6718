import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import models  # noqa: F401  (registers ORM tables)
from .database import Base, engine
from .routes.assessment import router as assessment_router
from .routes.leads import router as leads_router
from .services.http_client import close_client


# Load environment variables from .env file
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):

    # Startup
    Base.metadata.create_all(bind=engine)
    print("Starting Investment Readiness Assessment API")
    print(f"   Lead capture:      {' Configured' if os.getenv('SUBMIT_LEAD_URL') else ' Not set (leads are logged only)'}")
    print(f"   Submission:        {' Configured' if os.getenv('SUBMIT_ASSESSMENT_URL') else ' Not set (webhook fallback only)'}")
    print(f"   Webhook fallback:  {' Configured' if os.getenv('ASSESSMENT_WEBHOOK_URL') else ' Not set'}")
    print(f"   Conversion pixel:  {' Configured' if os.getenv('CONVERSION_TRACKING_URL') else ' Not set'}")

    yield

    await close_client()
    print("Shutting down Investment Readiness Assessment API")


app = FastAPI(
    title="StartWise Investment Readiness Assessment",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        origin.strip()
        for origin in os.getenv(
            "CORS_ORIGINS",
            "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173",
        ).split(",")
        if origin.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(assessment_router)
app.include_router(leads_router)


@app.get(
    "/",
    summary="API Root",
    description="Welcome endpoint with API information",
    tags=["General"]
)
async def root():
    """Root endpoint with API information."""
    return {
        "name": "StartWise Investment Readiness Assessment",
        "version": "0.1.0",
        "description": "12-step investment readiness wizard with deterministic scoring",
        "docs": "/docs",
        "endpoints": {
            "start": "POST /assessment/sessions - Start or resume an assessment",
            "catalogs": "GET /assessment/catalogs/{startup_type} - Option lists",
            "quick_intake": "POST /leads/quick-intake - Short lead form",
            "health": "GET /health - Service health check"
        }
    }


@app.get(
    "/health",
    summary="Global Health Check",
    description="Check if the API server is running",
    tags=["General"]
)
async def health():
    """Global health check endpoint."""
    return {
        "status": "healthy",
        "service": "investment-readiness-assessment",
        "version": "0.1.0"
    }


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler for unhandled errors."""
    logging.getLogger(__name__).exception("Unhandled error on %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "detail": str(exc) if os.getenv("DEBUG", "false").lower() == "true" else "An unexpected error occurred"
        }
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("DEBUG", "true").lower() == "true",
    )
