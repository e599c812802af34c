"""
DarkMaker Backend API

FastAPI application that turns a video link or a narration into a narrated
slideshow video. ``create_app`` wires settings, the workspace and the tool
gateway into ``app.state`` where the route dependencies pick them up.
"""

import os
import shutil
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from .config import (
    API_TITLE,
    API_DESCRIPTION,
    API_VERSION,
    CORS_ORIGINS,
    Settings,
)
from .core import (
    setup_logging,
    get_logger,
    set_request_id,
    clear_context,
    parse_bool_env,
    run_startup_runtime_checks,
    REQUIRED_RENDER_TOOLS,
)
from .core.runtime import OPTIONAL_TOOLS
from .models import HealthResponse
from .routes import render_router, media_router
from .services.gateway import ToolGateway
from .services.infrastructure.storage import Workspace

logger = get_logger(__name__, service="api")


def configure_logging() -> None:
    """Logging from LOG_LEVEL, LOG_FILE and JSON_LOGS"""
    log_file = os.getenv("LOG_FILE")
    setup_logging(
        level=os.getenv("LOG_LEVEL", "INFO"),
        log_file=Path(log_file) if log_file else None,
        use_json=parse_bool_env(os.getenv("JSON_LOGS")),
    )


def _tool_checks() -> Dict[str, Dict[str, Any]]:
    tools = [(name, True) for name in REQUIRED_RENDER_TOOLS] + [(name, False) for name in OPTIONAL_TOOLS]
    checks = {}
    for name, required in tools:
        path = shutil.which(name)
        checks[name] = {"available": path is not None, "required": required, "path": path}
    return checks


def build_health_report(workspace: Workspace, runtime_report: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Tool, directory and disk checks for /health

    The report is unhealthy when a required tool is missing from PATH or a
    workspace directory cannot be written to.
    """
    checks: Dict[str, Any] = _tool_checks()
    problems = [name for name, check in checks.items() if check["required"] and not check["available"]]

    for dir_name, dir_path in (("intake", workspace.intake_dir), ("output", workspace.output_dir)):
        writable = dir_path.is_dir() and os.access(dir_path, os.W_OK)
        checks[f"{dir_name}_dir"] = {"path": str(dir_path), "writable": writable}
        if not writable:
            problems.append(f"{dir_name}_dir")

    try:
        checks["disk_space"] = workspace.disk_usage()
    except OSError as exc:
        checks["disk_space"] = {"error": str(exc)}
        logger.error("Health check could not read disk usage", extra={"error": str(exc)})

    if runtime_report is not None:
        checks["runtime_startup"] = runtime_report

    if problems:
        logger.warning("Health check failed", extra={"failing": problems})
    return {"status": "unhealthy" if problems else "healthy", "checks": checks}


@asynccontextmanager
async def lifespan(app: FastAPI):
    workspace: Workspace = app.state.workspace
    workspace.prepare()

    # Production refuses to start without ffmpeg unless explicitly told otherwise
    strict = parse_bool_env(
        os.getenv("STARTUP_STRICT_RUNTIME_CHECKS"),
        default=os.getenv("ENV", "").lower() == "production",
    )
    app.state.runtime_report = run_startup_runtime_checks(
        intake_dir=workspace.intake_dir,
        output_dir=workspace.output_dir,
        strict_tools=strict,
    )
    logger.info("Startup runtime checks complete", extra={"ok": app.state.runtime_report["ok"]})
    yield
    logger.info("Shutting down DarkMaker Backend API")


async def correlate_request(request: Request, call_next):
    """Bind a request id to every log line the request produces and echo it back"""
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    set_request_id(request_id)
    try:
        response = await call_next(request)
        logger.info(f"{request.method} {request.url.path} -> {response.status_code}", extra={
            "client": request.client.host if request.client else "unknown",
        })
        response.headers["X-Request-ID"] = request_id
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        return response
    finally:
        clear_context()


def create_app(
    settings: Optional[Settings] = None,
    workspace: Optional[Workspace] = None,
    gateway: Optional[ToolGateway] = None,
) -> FastAPI:
    """
    Build the FastAPI application

    Args:
        settings: Configuration (from the environment when omitted)
        workspace: Intake/output directories (derived from settings when omitted)
        gateway: External tool gateway (built from settings when omitted)
    """
    settings = settings or Settings.from_env()
    workspace = workspace or Workspace(settings.intake_dir, settings.output_dir)

    app = FastAPI(title=API_TITLE, description=API_DESCRIPTION, version=API_VERSION, lifespan=lifespan)
    app.state.settings = settings
    app.state.workspace = workspace
    app.state.gateway = gateway or ToolGateway(settings, workspace)
    app.state.runtime_report = None

    app.middleware("http")(correlate_request)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(render_router)
    app.include_router(media_router)

    @app.get("/")
    async def root():
        return {"message": "DarkMaker backend is running", "version": API_VERSION}

    @app.get("/status")
    async def status():
        """Liveness signal for uptime monitors"""
        return {"status": "ok"}

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """200 with the checks when healthy, 503 with the same body otherwise"""
        report = build_health_report(workspace, app.state.runtime_report)
        if report["status"] != "healthy":
            raise HTTPException(status_code=503, detail=report)
        return HealthResponse(**report)

    logger.info("DarkMaker Backend API created", extra={
        "intake_dir": str(workspace.intake_dir),
        "output_dir": str(workspace.output_dir),
        "keep_reused_narration": settings.keep_reused_narration,
    })
    return app


configure_logging()
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=app.state.settings.port)
