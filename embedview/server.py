import argparse
import asyncio
import json
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, StreamingResponse
from pydantic import ValidationError

from embedview.activity_log import ActivityLog
from embedview.config import Settings, load_settings
from embedview.controller import EmbedController
from embedview.page import render_page
from embedview.views import (
    EmbedOutcomeRequest,
    EmbedOutcomeResponse,
    EmbedSnapshot,
    InputRequest,
    LogsResponse,
    SubmitRequest,
    SubmitResponse,
)

logger = logging.getLogger(__name__)

# Seconds of silence before the event stream sends a keepalive comment
SSE_KEEPALIVE_SECONDS = 15.0


def _sse_event(data: dict) -> str:
    """Format a dict as an SSE event."""
    return f"data: {json.dumps(data)}\n\n"


async def event_stream(request: Request, controller: EmbedController) -> AsyncIterator[str]:
    """Snapshot first, then every log/state change until the client goes away."""
    queue = controller.subscribe()
    try:
        yield _sse_event({
            "type": "snapshot",
            "state": controller.snapshot().model_dump(mode="json"),
            "entries": [e.model_dump(mode="json") for e in controller.activity_log.entries],
        })
        while True:
            if await request.is_disconnected():
                break
            try:
                event = await asyncio.wait_for(queue.get(), timeout=SSE_KEEPALIVE_SECONDS)
            except asyncio.TimeoutError:
                yield ": keepalive\n\n"
                continue
            yield _sse_event(event)
    except Exception as e:
        logger.error(f"Event stream error: {e}", exc_info=True)
    finally:
        controller.unsubscribe(queue)


def create_app(
    settings: Settings | None = None,
    controller: EmbedController | None = None,
) -> FastAPI:
    """Create the preview application around one controller.

    Args:
        settings: Runtime settings. Loaded from the environment if omitted.
        controller: Controller to serve. A fresh one is built from settings
            if omitted.
    """
    settings = settings or load_settings()
    if controller is None:
        controller = EmbedController(
            ActivityLog(timestamp_format=settings.timestamp_format),
            timeout=settings.embed_timeout,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        controller.log_info("Application initialized")
        logger.info("Embed preview ready")
        yield
        controller.watchdog.cancel()
        logger.info("Embed preview stopped")

    app = FastAPI(title="embedview", lifespan=lifespan)
    app.state.controller = controller
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", response_class=HTMLResponse)
    async def index():
        return render_page(controller.raw_input)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.get("/state", response_model=EmbedSnapshot)
    async def get_state():
        return controller.snapshot()

    @app.get("/logs", response_model=LogsResponse)
    async def get_logs():
        return LogsResponse(entries=list(controller.activity_log.entries))

    @app.post("/input", response_model=EmbedSnapshot)
    async def set_input(body: InputRequest):
        controller.set_input(body.text)
        return controller.snapshot()

    @app.post("/submit", response_model=SubmitResponse)
    async def submit(body: SubmitRequest):
        entry = controller.submit(body.url)
        return SubmitResponse(state=controller.snapshot(), entry=entry)

    @app.post("/embed/loaded", response_model=EmbedOutcomeResponse)
    async def embed_loaded(body: EmbedOutcomeRequest):
        applied = controller.on_embed_loaded(body.generation)
        return EmbedOutcomeResponse(applied=applied, state=controller.snapshot())

    @app.post("/embed/failed", response_model=EmbedOutcomeResponse)
    async def embed_failed(body: EmbedOutcomeRequest):
        applied = controller.on_embed_failed(body.generation)
        return EmbedOutcomeResponse(applied=applied, state=controller.snapshot())

    @app.get("/events")
    async def events(request: Request):
        return StreamingResponse(event_stream(request, controller), media_type="text/event-stream")

    return app


def main(argv: list[str] | None = None) -> None:
    import uvicorn

    settings = load_settings()
    parser = argparse.ArgumentParser(prog="embedview", description="Serve the iframe preview page.")
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    parser.add_argument("--log-level", default=settings.log_level)
    args = parser.parse_args(argv)

    try:
        settings = Settings.model_validate(
            {**settings.model_dump(), "host": args.host, "port": args.port, "log_level": args.log_level}
        )
    except ValidationError as e:
        parser.error(str(e))

    logging.basicConfig(
        level=settings.log_level.upper() if settings.log_level != "trace" else logging.DEBUG,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler()],
    )
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level)


if __name__ == "__main__":
    main()
