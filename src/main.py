"""
FastAPI Application Entry Point for AI Code Reviewer.

Provides the review endpoint consumed by the browser client.
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncGenerator

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from src import __version__
from src.config import get_settings, setup_logging
from src.models.schemas import HealthResponse, ReviewRequest
from src.services.review_service import InvalidInputError, ReviewService, UpstreamError

PROMPT_REQUIRED_MESSAGE = "Prompt is required"
GENERATION_FAILED_MESSAGE = "Error generating review"

# Setup logging
logger = setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Builds the review service once at startup and exposes it on app.state.
    """
    logger.info("Starting AI Code Reviewer...")

    settings = get_settings()
    app.state.review_service = ReviewService()

    logger.info(f"Model: {settings.openai_model}")
    logger.info(f"OpenAI configured: {settings.is_openai_configured}")

    yield

    logger.info("Shutting down AI Code Reviewer...")


def get_review_service(request: Request) -> ReviewService:
    """Dependency returning the review service built at startup."""
    return request.app.state.review_service


# Create FastAPI application
app = FastAPI(
    title="AI Code Reviewer",
    description="""
    Paste source code and receive a markdown review written by a language model.

    ## Endpoints
    - **POST /ai/getReview**: review a code snippet
    - **GET /health**: service health
    - **GET /config**: non-sensitive configuration
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Reject malformed review bodies the same way as a missing prompt."""
    logger.info(f"Rejected malformed request body: {exc.errors()}")
    return PlainTextResponse(PROMPT_REQUIRED_MESSAGE, status_code=status.HTTP_400_BAD_REQUEST)


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    """Handle missing or empty code."""
    return PlainTextResponse(PROMPT_REQUIRED_MESSAGE, status_code=status.HTTP_400_BAD_REQUEST)


@app.exception_handler(UpstreamError)
async def upstream_error_handler(request: Request, exc: UpstreamError):
    """Handle model API failures without echoing provider details."""
    logger.error(f"Review generation failed: {exc}")
    return PlainTextResponse(
        GENERATION_FAILED_MESSAGE,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return PlainTextResponse(
        "Internal Server Error",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


# Health check endpoint
@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="Health Check",
    description="Check the health status of the API and its dependencies.",
)
async def health_check(
    review_service: ReviewService = Depends(get_review_service),
) -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.utcnow(),
        model_configured=review_service.is_configured,
    )


# Review endpoint
@app.post(
    "/ai/getReview",
    response_class=PlainTextResponse,
    tags=["Code Review"],
    summary="Review Code Snippet",
    description="Forward a code snippet to the review model and return its markdown review.",
    responses={
        200: {"description": "Markdown review", "content": {"text/plain": {}}},
        400: {"description": PROMPT_REQUIRED_MESSAGE, "content": {"text/plain": {}}},
        500: {"description": GENERATION_FAILED_MESSAGE, "content": {"text/plain": {}}},
    },
)
async def get_review(
    payload: ReviewRequest,
    review_service: ReviewService = Depends(get_review_service),
) -> PlainTextResponse:
    """
    Review a code snippet.

    Args:
        payload: Request body containing the code to review.

    Returns:
        The generated review as plain text.
    """
    logger.info(f"Received review request ({len(payload.code or '')} chars)")

    review = await review_service.generate_review(payload.code)

    logger.info(f"Review generated ({len(review)} chars)")
    return PlainTextResponse(review)


@app.get(
    "/config",
    tags=["Info"],
    summary="Get Configuration",
    description="Get current configuration status (non-sensitive info only).",
)
async def get_config() -> dict:
    """
    Get configuration status.

    Returns non-sensitive configuration information.
    """
    settings = get_settings()
    return {
        "openai_configured": settings.is_openai_configured,
        "openai_model": settings.openai_model,
        "upstream_timeout": settings.upstream_timeout,
        "log_level": settings.log_level,
    }


# Run with uvicorn when executed directly
if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "src.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
