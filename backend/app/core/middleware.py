"""
Middleware de tratamento de exceções.

Converte exceções em respostas HTTP padronizadas.
"""

import traceback
import uuid

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BusinessRuleError,
    ConciliacaoException,
    DuplicateActiveAgreementError,
    ResourceAlreadyExistsError,
    ResourceNotFoundError,
    ValidationError,
)
from app.schemas.base import ErrorDetail, ErrorResponse

logger = structlog.get_logger()

# Ordem importa: subclasses antes das classes base
STATUS_POR_EXCECAO: list[tuple[type[ConciliacaoException], int]] = [
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (ResourceNotFoundError, status.HTTP_404_NOT_FOUND),
    (ResourceAlreadyExistsError, status.HTTP_409_CONFLICT),
    (DuplicateActiveAgreementError, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (BusinessRuleError, status.HTTP_400_BAD_REQUEST),
]


def create_error_response(
    status_code: int,
    code: str,
    message: str,
    details: dict | None = None,
    field: str | None = None,
) -> JSONResponse:
    """Cria resposta de erro padronizada."""
    erro = ErrorResponse(error=ErrorDetail(code=code, message=message, field=field))
    content = erro.model_dump(exclude_none=True)
    if details and settings.DEBUG:
        content["error"]["details"] = details

    return JSONResponse(status_code=status_code, content=content)


def status_para_excecao(exc: ConciliacaoException) -> int:
    """Resolve o status HTTP de uma exceção da aplicação."""
    for exc_type, http_status in STATUS_POR_EXCECAO:
        if isinstance(exc, exc_type):
            return http_status
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def conciliacao_exception_handler(
    request: Request, exc: ConciliacaoException
) -> JSONResponse:
    """Handler para exceções da aplicação."""
    logger.warning(
        "Exceção de negócio",
        code=exc.code,
        message=exc.message,
        path=request.url.path,
        details=exc.details,
    )

    return create_error_response(
        status_code=status_para_excecao(exc),
        code=exc.code,
        message=exc.message,
        details=exc.details,
        field=getattr(exc, "field", None),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler para exceções não tratadas."""
    logger.error(
        "Exceção não tratada",
        exc_type=type(exc).__name__,
        message=str(exc),
        path=request.url.path,
        traceback=traceback.format_exc() if settings.DEBUG else None,
    )

    message = "Erro interno do servidor"
    details = None

    if settings.DEBUG:
        message = str(exc)
        details = {"traceback": traceback.format_exc()}

    return create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code="INTERNAL_ERROR",
        message=message,
        details=details,
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Registra handlers de exceção na aplicação."""
    app.add_exception_handler(ConciliacaoException, conciliacao_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)


class RequestContextMiddleware:
    """
    Middleware ASGI que adiciona contexto às requisições.

    Gera um request_id, associa ao contexto do structlog e devolve
    no header ``x-request-id``.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = uuid.uuid4().hex[:8]

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            path=scope.get("path", ""),
            method=scope.get("method", ""),
        )

        async def send_wrapper(message):
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                headers.append((b"x-request-id", request_id.encode()))
                message["headers"] = headers
            await send(message)

        await self.app(scope, receive, send_wrapper)
