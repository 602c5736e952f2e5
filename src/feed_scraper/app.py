"""HTTP front door for the feed scraper service."""

import uuid
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from pydantic import ValidationError
from starlette.background import BackgroundTask
from starlette.concurrency import run_in_threadpool

from . import __version__
from .artifacts import ArtifactStore
from .config import Config
from .errors import MalformedRequestError
from .logging_config import ExecutionLogger, create_execution_logger, new_execution_id
from .models import LinkRequest
from .scraper import FeedScraper

ERROR_BODY = {"error": "Internal Server Error"}
TEST_ROUTE_BODY = {"message": "This is a Test Route"}


def new_request_id() -> str:
    """Generate a unique request ID, also used to name the request's artifact."""
    return f"{new_execution_id('req')}_{uuid.uuid4().hex[:8]}"


def parse_link_request(body: bytes) -> LinkRequest:
    """Parse a raw request body into a LinkRequest.

    Raises:
        MalformedRequestError: If the body is not a JSON object with a string url
    """
    try:
        return LinkRequest.model_validate_json(body)
    except ValidationError as e:
        raise MalformedRequestError(f"Invalid link request body: {e}") from e


def handle_error(error: Exception, logger: ExecutionLogger) -> JSONResponse:
    """Log an error in full and return the generic 500 response."""
    logger.error(
        f"Request failed: {type(error).__name__}: {error}",
        exc_info=True,
        feed_url=getattr(error, "url", None),
        error=str(error),
    )
    return JSONResponse(status_code=500, content=ERROR_BODY)


def create_app(config: Config | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Service configuration, read from the environment when omitted

    Returns:
        Configured FastAPI application
    """
    config = config or Config()
    server_config = config.get_server_config()
    scraper_config = config.get_scraper_config()
    artifact_config = config.get_artifact_config()
    artifacts = ArtifactStore(artifact_config.directory, artifact_config.download_name)

    app = FastAPI(title="Feed Scraper API", version=__version__)
    app.state.config = config
    app.state.artifacts = artifacts

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[server_config.allowed_origin],
        allow_methods=server_config.allowed_methods,
        allow_credentials=False,
    )

    @app.get("/")
    def test_route():
        return TEST_ROUTE_BODY

    @app.post("/getLink")
    async def get_link(request: Request):
        request_id = new_request_id()
        logger = create_execution_logger("api", request_id)
        logger.log_started(path="/getLink")
        logger.info("Received The Link Request")

        output_path: Path | None = None
        try:
            link = parse_link_request(await request.body())
            output_path = artifacts.new_path(request_id)

            scraper = FeedScraper(scraper_config, execution_id=request_id)
            try:
                rows = await run_in_threadpool(scraper.scrape, link.url, output_path)
            finally:
                scraper.close()
        except Exception as e:
            if output_path is not None:
                artifacts.discard(output_path)
            logger.log_finished(success=False, error=str(e))
            return handle_error(e, logger)

        logger.log_finished(success=True, feed_url=link.url, rows_written=rows)

        background = None
        if not artifact_config.keep:
            background = BackgroundTask(artifacts.discard, output_path)

        return FileResponse(
            output_path,
            media_type="text/csv",
            headers={
                "Content-Type": "text/csv",
                "Content-Disposition": (
                    f"attachment; filename={artifacts.download_name}"
                ),
                "X-Request-ID": request_id,
            },
            background=background,
        )

    return app


# ASGI entry point for `uvicorn feed_scraper.app:app`
app = create_app()
