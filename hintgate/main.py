import time
from typing import Callable, Optional, Sequence
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from hintgate.config import Settings, settings as default_settings
from hintgate.errors import HintGateError, ThrottleError
from hintgate.routes import hints
from hintgate.services.identity import FirebaseTokenVerifier
from hintgate.services.llm_service import build_generators
from hintgate.services.pipeline import HintPipeline
from hintgate.utils.logger import logger

HTTP_ERROR_CODES = {
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


async def hintgate_error_handler(request: Request, exc: HintGateError):
    content = {"success": False, "error": exc.message, "code": exc.code}
    headers = {}
    if isinstance(exc, ThrottleError):
        if exc.retry_after is not None:
            content["retryAfter"] = exc.retry_after
            headers["Retry-After"] = str(exc.retry_after)
        if exc.remaining_time is not None:
            content["remainingTime"] = exc.remaining_time
            headers["Retry-After"] = str(max(exc.remaining_time // 1000, 1))
    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    code = HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail), "code": code},
        headers=getattr(exc, "headers", None),
    )


def create_app(
    app_settings: Optional[Settings] = None,
    generators: Optional[Sequence] = None,
    token_verifier=None,
    clock: Callable[[], float] = time.time,
) -> FastAPI:
    """Builds the API with its own pipeline state. Collaborators can be injected for tests."""
    app_settings = app_settings or default_settings

    if generators is None:
        generators = build_generators(app_settings)
    if token_verifier is None and app_settings.AUTH_MODE.lower() == "bearer":
        token_verifier = FirebaseTokenVerifier(
            app_settings.FIREBASE_SERVICE_ACCOUNT, app_settings.FIREBASE_PROJECT_ID
        )

    app = FastAPI(
        title="Hint Gateway API",
        description="Admission-controlled hint generation for the word guessing game",
        version="1.0.0"
    )
    app.state.settings = app_settings
    app.state.pipeline = HintPipeline(app_settings, generators, token_verifier, clock)

    # Allow CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(HintGateError, hintgate_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    app.include_router(hints.router)

    @app.get("/")
    async def root():
        """Health check endpoint."""
        return {"status": "running", "environment": app_settings.ENVIRONMENT}

    if not app_settings.APP_SECRET and app_settings.AUTH_MODE.lower() == "signature":
        logger.warning("APP_SECRET is not set. All hint requests will be rejected.")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("hintgate.main:app", host=default_settings.HOST, port=default_settings.PORT)
