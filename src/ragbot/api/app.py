import uuid
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

import structlog
from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ragbot.api.schemas import ChatRequest, ChatResponse, InitResponse, TurnModel
from ragbot.components import Components
from ragbot.errors import InvalidQuestionError
from ragbot.util.db import dispose_engine
from ragbot.util.logging import bind_request_context, clear_request_context

_logger = structlog.get_logger()

_GENERIC_ERROR = "Internal Server Error"


def get_components(request: Request) -> Components:
    components: Components = request.app.state.components
    return components


def create_app(components: Components) -> FastAPI:
    """Build the HTTP façade around already-wired components."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        _logger.info("server_starting", vector_store=components.vector_store.identify().value)
        yield
        dispose_engine()
        _logger.info("server_stopped")

    app = FastAPI(
        title="ragbot",
        description="Retrieval-augmented support chatbot",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.components = components

    @app.middleware("http")
    async def request_context(
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        bind_request_context(request_id=request_id, path=request.url.path)
        try:
            response = await call_next(request)
        finally:
            clear_request_context()
        response.headers["x-request-id"] = request_id
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        _logger.info("request_rejected", errors=len(exc.errors()))
        return JSONResponse(status_code=400, content={"detail": "Malformed request body"})

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/init", response_model=InitResponse)
    def init(components: Components = Depends(get_components)) -> InitResponse:
        try:
            count = components.init_knowledge()
        except Exception:
            _logger.error("init_failed", exc_info=True)
            raise HTTPException(status_code=500, detail=_GENERIC_ERROR) from None

        return InitResponse(message="Documents added to vector store", chunks=count)

    @app.post("/chat", response_model=ChatResponse)
    def chat(
        request: ChatRequest | None = None,
        components: Components = Depends(get_components),
    ) -> ChatResponse:
        request = request or ChatRequest()
        history = [turn.to_turn() for turn in request.history] if request.history else None
        try:
            result = components.chat_service.chat(
                user_question=request.user_question,
                history=history,
                conversation_id=request.conversation_id,
            )
        except InvalidQuestionError as e:
            _logger.info("chat_rejected", reason=str(e))
            raise HTTPException(status_code=400, detail=str(e)) from e
        except Exception:
            _logger.error("chat_failed", exc_info=True)
            raise HTTPException(status_code=500, detail=_GENERIC_ERROR) from None

        return ChatResponse(
            response=result.response,
            history=[TurnModel.from_turn(turn) for turn in result.history],
            conversation_id=result.conversation_id,
        )

    return app
