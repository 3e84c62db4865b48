"""FastAPI application serving the results report.

Pages are rendered on every request from the ReportModel currently held by
a :class:`ReportHolder`; nothing rendered is cached. Raw artifact files are
served only from below the configured artifact root.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

import jsonschema
import yaml
from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import HTMLResponse, Response

from dumpreport._version import __version__
from dumpreport.config import DEFAULT_CONFIG, ReportConfig
from dumpreport.health import DegenerateHealthRecordError
from dumpreport.logging import get_logger
from dumpreport.report import render_summary_html, render_tests_html
from dumpreport.report_model import ReportHolder, ReportModel
from dumpreport.results.summary import RunSummary

logger = get_logger(__name__)


def resolve_artifact_path(artifact_root: Path, requested: str) -> Path:
    """Resolve ``requested`` under ``artifact_root``.

    Raises:
        PermissionError: If the resolved path lies outside the root.
        ValueError: If ``requested`` is not a usable path.
    """
    if "\x00" in requested:
        raise ValueError("File path contains a NUL byte")
    root = artifact_root.resolve()
    candidate = Path(requested)
    if not candidate.is_absolute():
        candidate = root / candidate
    candidate = candidate.resolve()
    if candidate != root and root not in candidate.parents:
        raise PermissionError(f"{requested} is outside the artifact root")
    return candidate


def create_app(
    holder: ReportHolder,
    config: ReportConfig = DEFAULT_CONFIG,
    reload: Optional[Callable[[], ReportModel]] = None,
) -> FastAPI:
    """Build the application.

    Args:
        holder: Source of the active ReportModel, read on every request.
        config: Provides the artifact root for raw file access.
        reload: Optional callable producing a fresh ReportModel; enables
            ``POST /api/reload``.
    """
    app = FastAPI(
        title="dumpreport",
        description="Test-run results and cluster health report",
        version=__version__,
    )
    artifact_root = Path(config.artifact_root)

    def _run_for_page(plugin: str) -> RunSummary:
        run = holder.current.get_run(plugin)
        if run is None:
            raise HTTPException(status_code=404, detail="No results loaded")
        return run

    @app.get("/", response_class=HTMLResponse)
    async def summary_page():
        """Overview of every plugin and the cluster health."""
        return HTMLResponse(render_summary_html(holder.current))

    # Plugin keys may be source paths, so both routes take the rest of the
    # path; the failed view is registered first to claim the suffix.
    @app.get("/tests/{plugin:path}/failed", response_class=HTMLResponse)
    async def failed_tests_page(plugin: str):
        """Failed and timed-out tests of one plugin."""
        logger.info(f"Failed tests page requested for plugin: {plugin}")
        return HTMLResponse(
            render_tests_html(_run_for_page(plugin), failures_only=True)
        )

    @app.get("/tests/{plugin:path}", response_class=HTMLResponse)
    async def tests_page(plugin: str):
        """All tests of one plugin; unknown plugins show the first one."""
        logger.info(f"Tests page requested for plugin: {plugin}")
        return HTMLResponse(render_tests_html(_run_for_page(plugin)))

    @app.get("/file")
    def raw_file(file: Optional[str] = Query(default=None)):
        """Raw bytes of an artifact below the artifact root."""
        if not file:
            logger.warning("URL param 'file' is missing")
            raise HTTPException(
                status_code=400, detail="URL param 'file' is missing"
            )
        logger.info(f'Handle request with param "file"={file}')
        try:
            path = resolve_artifact_path(artifact_root, file)
        except PermissionError:
            logger.warning(f"Refused file outside artifact root: {file}")
            raise HTTPException(
                status_code=403, detail="File is outside artifact root"
            ) from None
        except ValueError:
            logger.warning(f"Refused unusable file path: {file!r}")
            raise HTTPException(status_code=400, detail="Invalid file path") from None
        if not path.is_file():
            logger.warning(f"Failed to read file {file}")
            raise HTTPException(status_code=404, detail=f"File not found: {file}")
        return Response(content=path.read_bytes(), media_type="text/plain")

    @app.get("/api/summary")
    async def api_summary():
        return holder.current.to_dict()

    @app.get("/api/runs/{plugin:path}")
    async def api_run(plugin: str):
        run = holder.current.find_run(plugin)
        if run is None:
            raise HTTPException(status_code=404, detail=f"Unknown plugin: {plugin}")
        return run.to_dict(include_tree=True)

    @app.post("/api/reload")
    def api_reload():
        """Re-ingest the artifacts and publish a new snapshot."""
        if reload is None:
            raise HTTPException(status_code=501, detail="Reload is not configured")
        try:
            model = reload()
        except (
            OSError,
            ValueError,
            yaml.YAMLError,
            jsonschema.ValidationError,
            DegenerateHealthRecordError,
        ) as e:
            logger.error(f"Reload failed, keeping current report: {e}")
            raise HTTPException(
                status_code=422, detail=f"Reload failed: {type(e).__name__}: {e}"
            ) from None
        holder.publish(model)
        logger.info(f"Published report generation {holder.generation}")
        return {"generation": holder.generation, "runs": len(model)}

    return app
