from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from api import studio
from config.settings import Settings
from core.errors import StudioError
from core.genai import GenAIProvider

load_dotenv()


def request_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request body."
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    if location:
        return f"Invalid request body: {location}: {first.get('msg')}"
    return f"Invalid request body: {first.get('msg')}"


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()

    app = FastAPI(title=settings.PROJECT_NAME, version=settings.VERSION)
    app.state.settings = settings
    app.state.genai_provider = GenAIProvider(settings)

    if not settings.key_set:
        logger.warning("GEMINI_API_KEY is not set, AI endpoints will fail until it is configured")

    @app.exception_handler(StudioError)
    async def studio_error_handler(request: Request, exc: StudioError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": request_validation_message(exc)})

    @app.middleware("http")
    async def limit_body_size(request: Request, call_next):
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit():
            too_large = int(content_length) > settings.MAX_BODY_BYTES
        else:
            # Chunked bodies carry no length header; count the bytes instead
            too_large = len(await request.body()) > settings.MAX_BODY_BYTES
        if too_large:
            return JSONResponse(status_code=413, content={"error": "Request body too large."})
        return await call_next(request)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONT_END_ORIGIN],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    # Include API routers
    app.include_router(studio.router, prefix=settings.API_V1_STR)

    @app.get("/")
    async def root():
        return {"message": "Gemini Studio API is running"}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=app.state.settings.HOST, port=app.state.settings.PORT)
