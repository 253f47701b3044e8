import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .llm_client import LLMError
from .settings import settings
from .stores import GameStore, StyleGuideStore
from .routers import articles
from .routers import games
from .routers import style_guides

logging.basicConfig(
	level=getattr(logging, settings.log_level.upper(), logging.INFO),
	format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


async def _http_error(request: Request, exc: StarletteHTTPException):
	return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=getattr(exc, "headers", None))


async def _validation_error(request: Request, exc: RequestValidationError):
	# Malformed bodies are client input errors, same as missing fields
	first = exc.errors()[0] if exc.errors() else {}
	location = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
	message = first.get("msg", "Invalid request body")
	return JSONResponse(status_code=400, content={"error": f"{location}: {message}" if location else message})


async def _llm_error(request: Request, exc: LLMError):
	logger.error("LLM error on %s: %s", request.url.path, exc)
	return JSONResponse(status_code=500, content={"error": str(exc)})


def create_app() -> FastAPI:
	app = FastAPI(title="Copy Desk API")
	# Stores live exactly as long as the app object
	app.state.style_guides = StyleGuideStore()
	app.state.games = GameStore()

	app.add_middleware(
		CORSMiddleware,
		allow_origins=settings.cors_origin_list(),
		allow_methods=["*"],
		allow_headers=["*"],
	)
	app.add_exception_handler(StarletteHTTPException, _http_error)
	app.add_exception_handler(RequestValidationError, _validation_error)
	app.add_exception_handler(LLMError, _llm_error)

	app.include_router(style_guides.router, prefix=settings.api_prefix)
	app.include_router(articles.router, prefix=settings.api_prefix)
	app.include_router(games.router, prefix=settings.api_prefix)

	@app.get("/", include_in_schema=False)
	async def redirect_root_to_docs():
		return RedirectResponse(url="/docs")

	@app.get("/info")
	def root():
		return {
			"status": "ok",
			"llm_provider": settings.llm_provider,
			"llm_configured": bool(settings.api_key),
		}

	return app


app = create_app()
