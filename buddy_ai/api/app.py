from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from buddy_ai.agents.buddy_agent import BuddyAgent
from buddy_ai.api import service
from buddy_ai.config.settings import settings
from buddy_ai.infrastructure.logging.logger import logger


MISSING_FIELDS_MESSAGE = "input and threadId are required"


class ChatRequest(BaseModel):
    input: Optional[str] = Field(default=None, description="User's latest message")
    threadId: Optional[str] = Field(default=None, description="Conversation thread identifier")


def create_app(agent: Optional[BuddyAgent] = None) -> FastAPI:
    """Build the HTTP app.

    Without an injected ``agent`` the default one is built at start-up, so
    missing credentials fail the process before the first request.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.agent is None:
            app.state.agent = service.get_default_agent()
        yield
        service.reset_default_agent()

    app = FastAPI(title="Buddy AI Assistant", version="1.0.0", lifespan=lifespan)
    app.state.agent = agent

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def _invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"message": MISSING_FIELDS_MESSAGE})

    @app.post("/api/buddy-ai")
    def chat(req: ChatRequest, request: Request):
        if not req.input or not req.threadId:
            return JSONResponse(status_code=400, content={"message": MISSING_FIELDS_MESSAGE})

        logger.info(
            "Incoming chat",
            extra={"extra": {"thread_id": req.threadId, "input_len": len(req.input)}},
        )
        try:
            current = request.app.state.agent or service.get_default_agent()
            result = service.run_chat(req.input, req.threadId, agent=current)
        except Exception as e:
            logger.exception("Chat processing failed: %s", e)
            return JSONResponse(status_code=500, content={"message": "Server error", "error": str(e)})
        return {"message": result["message"]}

    @app.get("/health")
    def health() -> Dict[str, Any]:
        return {"status": "ok"}

    return app


def main() -> None:
    import uvicorn

    uvicorn.run(create_app(), host="0.0.0.0", port=3000)


if __name__ == "__main__":
    main()
