from __future__ import annotations
import logging
import time
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .errors import ApiError
from .gemini_client import GeminiClient, TextGenerator
from .logging_config import configure_logging
from .routers import chat, diagram, notes, planner, reviewer, roadmaps
from .settings import settings

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


def _error_details(message: str) -> str:
	return message if settings.debug else "Internal server error"


def _register_exception_handlers(app: FastAPI) -> None:
	@app.exception_handler(ApiError)
	async def api_error_handler(request: Request, exc: ApiError):
		body = {"success": False, "error": exc.message}
		if exc.status_code >= 500:
			body["details"] = _error_details(exc.details or exc.message)
		return JSONResponse(status_code=exc.status_code, content=body)

	@app.exception_handler(RequestValidationError)
	async def request_validation_handler(request: Request, exc: RequestValidationError):
		first = exc.errors()[0] if exc.errors() else {}
		where = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
		message = f"Invalid request: {where} {first.get('msg', '')}".strip() if where else "Invalid request body"
		return JSONResponse(status_code=400, content={"success": False, "error": message})

	@app.exception_handler(StarletteHTTPException)
	async def http_error_handler(request: Request, exc: StarletteHTTPException):
		if exc.status_code == 404 and request.url.path.startswith("/api"):
			return JSONResponse(
				status_code=404,
				content={
					"success": False,
					"error": "API endpoint not found",
					"path": request.url.path,
					"method": request.method,
				},
			)
		return JSONResponse(status_code=exc.status_code, content={"success": False, "error": str(exc.detail)})

	@app.exception_handler(Exception)
	async def unhandled_error_handler(request: Request, exc: Exception):
		logger.exception("Unhandled error on %s %s", request.method, request.url.path)
		return JSONResponse(
			status_code=500,
			content={
				"success": False,
				"error": "Internal server error",
				"details": _error_details(str(exc)),
				"timestamp": datetime.now(timezone.utc).isoformat(),
			},
		)


def create_app(generator: Optional[TextGenerator] = None) -> FastAPI:
	"""Build the API. ``generator`` replaces the Gemini client, e.g. with a stub in tests."""
	app = FastAPI(title="AI Student Assistant API", version=API_VERSION)
	owns_generator = generator is None
	app.state.generator = generator if generator is not None else GeminiClient()

	app.add_middleware(
		CORSMiddleware,
		allow_origins=settings.cors_origins,
		allow_credentials=True,
		allow_methods=["*"],
		allow_headers=["*"],
	)

	@app.middleware("http")
	async def log_requests(request: Request, call_next):
		start = time.perf_counter()
		response = await call_next(request)
		elapsed_ms = (time.perf_counter() - start) * 1000
		logger.info("%s %s - %d (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms)
		return response

	_register_exception_handlers(app)

	app.include_router(chat.router)
	app.include_router(diagram.router)
	app.include_router(planner.router)
	app.include_router(notes.router)
	app.include_router(reviewer.router)
	app.include_router(roadmaps.router)

	@app.get("/api/health")
	def health():
		return {
			"status": "OK",
			"message": "AI Student Assistant API is running",
			"timestamp": datetime.now(timezone.utc).isoformat(),
			"environment": settings.app_env,
			"gemini_configured": bool(getattr(app.state.generator, "configured", True)),
		}

	@app.get("/")
	def root():
		return {
			"message": "AI Student Assistant API",
			"version": API_VERSION,
			"endpoints": [
				"/api/health",
				"/api/gemini/test",
				"/api/chat/message",
				"/api/diagram/generate",
				"/api/planner/create-plan",
				"/api/notes/process",
				"/api/notes/process-text",
				"/api/reviewer/review",
				"/api/roadmaps",
			],
		}

	@app.on_event("shutdown")
	async def shutdown_event():
		if owns_generator:
			await app.state.generator.aclose()

	return app


configure_logging(settings.log_level)
app = create_app()
