from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.deps import get_chat_service
from app.api.routes.chat import router as chat_router
from app.catalog.repository import JsonCatalogRepository
from app.catalog.snapshot import CatalogSnapshotBuilder
from app.chat.prompt import PromptBuilder
from app.core.config import settings
from app.core.exceptions import CatalogUnavailable, ClientInputError, ElectroShopError
from app.core.logging import get_logger, log_shutdown_info, log_startup_info
from app.core.security import TokenVerifier
from app.llm.client import LLMClientFactory
from app.models.response import ErrorResponse, HealthCheckResponse, ResponseStatus
from app.services.chat_service import ChatService

logger = get_logger(__name__)


def build_chat_service() -> ChatService:
    """Wire the chat service from settings"""
    repository = JsonCatalogRepository(settings.CATALOG_PATH)
    return ChatService(
        snapshot_builder=CatalogSnapshotBuilder(repository, repository),
        prompt_builder=PromptBuilder(),
        llm_client=LLMClientFactory.create_client(),
    )


def build_token_verifier() -> TokenVerifier:
    if not settings.JWT_SECRET:
        logger.warning("AUTH_ENABLED is set but JWT_SECRET is empty; all chat requests will be rejected")
    return TokenVerifier(secret=settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def create_app(
    chat_service: Optional[ChatService] = None,
    token_verifier: Optional[TokenVerifier] = None,
    auth_enabled: bool = settings.AUTH_ENABLED,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        chat_service: Chat service to serve; built from settings if omitted
        token_verifier: Bearer-token verifier; built from settings if omitted
        auth_enabled: Require a bearer token on the chat endpoint
    """
    app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.chat_service = chat_service or build_chat_service()
    if auth_enabled:
        app.state.token_verifier = token_verifier or build_token_verifier()
    else:
        app.state.token_verifier = None

    app.include_router(chat_router)

    def error_response(exc: ElectroShopError) -> JSONResponse:
        error = ErrorResponse(
            error_code=exc.code,
            message=exc.message,
            details=exc.details or None,
        )
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(
            status_code=exc.status_code,
            content=jsonable_encoder(error),
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Invalid request to {request.url.path}: {exc.errors()}")
        return error_response(
            ClientInputError(
                "Malformed request body",
                details={"errors": jsonable_encoder(exc.errors())},
            )
        )

    @app.exception_handler(ElectroShopError)
    async def shop_exception_handler(request: Request, exc: ElectroShopError):
        return error_response(exc)

    @app.on_event("startup")
    async def startup_event():
        log_startup_info()
        logger.info("Application startup completed")

    @app.on_event("shutdown")
    async def shutdown_event():
        log_shutdown_info()

    @app.get("/health", response_model=HealthCheckResponse)
    def health(request: Request):
        """Health check endpoint: checks the generation backend and catalog."""
        service = get_chat_service(request)
        llm_ok = service.llm_client.check_connection()

        total_products = None
        try:
            page = service.snapshot_builder.catalog.fetch(page=1, page_size=1)
            total_products = page.total_count
            catalog_ok = True
        except CatalogUnavailable as e:
            logger.warning(f"Catalog health check failed: {e.message}")
            catalog_ok = False

        ok = llm_ok and catalog_ok
        return HealthCheckResponse(
            status=ResponseStatus.OK if ok else ResponseStatus.DEGRADED,
            llm_ok=llm_ok,
            catalog_ok=catalog_ok,
            model_name=getattr(service.llm_client, "model", None),
            total_products=total_products,
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD,
    )
