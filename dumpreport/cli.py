"""Command-line interface for dumpreport."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from time import perf_counter
from typing import Any, List, Optional

from dumpreport.config import DEFAULT_CONFIG, ReportConfig, load_config
from dumpreport.health import format_health_rate
from dumpreport.io.loader import load_report
from dumpreport.logging import get_logger, set_global_log_level
from dumpreport.report_model import ReportModel
from dumpreport.types.base import Status

logger = get_logger(__name__)


def _format_table(
    headers: List[str],
    rows: List[List[Any]],
    min_width: int = 6,
    max_col_width: Optional[int] = None,
) -> str:
    """Format data as a simple ASCII table.

    Args:
        headers: Column headers.
        rows: Data rows.
        min_width: Minimum column width.
        max_col_width: Clip longer cells with an ASCII ellipsis.

    Returns:
        Formatted table string, empty when there are no rows.
    """
    if not rows:
        return ""

    def clip(val: Any) -> str:
        s = str(val)
        if max_col_width is not None and len(s) > max_col_width:
            return s[: max_col_width - 3] + "..."
        return s

    clipped_headers = [clip(h) for h in headers]
    clipped_rows = [[clip(item) for item in row] for row in rows]

    all_data = [clipped_headers] + clipped_rows
    col_widths = [
        max(max(len(row[i]) for row in all_data), min_width)
        for i in range(len(clipped_headers))
    ]

    def format_row(row_data: List[str]) -> str:
        return "   " + " | ".join(
            f"{item:<{col_widths[i]}}" for i, item in enumerate(row_data)
        )

    lines = [format_row(clipped_headers)]
    lines.append("   " + "-+-".join("-" * width for width in col_widths))
    lines.extend(format_row(row) for row in clipped_rows)
    return "\n".join(lines)


def _format_duration(seconds: float) -> str:
    """Return a concise duration string, e.g. "123.0 ms" or "1.23 s"."""
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f} ms"
    return f"{seconds:.2f} s"


def _print_summary(model: ReportModel) -> None:
    statuses = list(Status)
    rows: List[List[Any]] = []
    for run in model.runs:
        if not run.available:
            rows.append([run.name, "unavailable", "-", *["-" for _ in statuses]])
            continue
        rows.append(
            [
                run.name,
                run.declared_status or "",
                run.summary.total,
                *[run.summary.count(s) for s in statuses],
            ]
        )

    print("\n📋 Plugins:")
    table = _format_table(
        ["Plugin", "Status", "Total", *[s.value for s in statuses]],
        rows,
        max_col_width=40,
    )
    print(table if table else "   (none)")

    for run in model.runs:
        if not run.available:
            print(f"\n❌ {run.name}: results unavailable ({run.error})")
        elif run.summary.failed_names:
            print(f"\n❌ Failed tests in {run.name}:")
            for name in run.summary.failed_names:
                print(f"   - {name}")

    cluster = model.cluster
    print("\n🩺 Cluster health:")
    print(f"   API Server version: {cluster.api_version or '(unknown)'}")
    for label, record, rate in (
        ("Node", cluster.node_health, model.node_health_rate),
        ("Pod", cluster.pod_health, model.pod_health_rate),
    ):
        print(
            f"   {label} health: {record.healthy}/{record.total}"
            f" ({format_health_rate(rate)})"
        )
        for detail in record.unhealthy_details():
            where = f"{detail.namespace}/" if detail.namespace else ""
            reason = f": {detail.reason}" if detail.reason else ""
            print(f"      unhealthy {where}{detail.name}{reason}")
    if cluster.error_summary:
        print(f"   Errors detected in files: {cluster.total_error_hits}")
        for category, hits in sorted(cluster.error_summary.items()):
            for location, count in sorted(hits.items()):
                print(f"      {category}: {count} in {location}")


def _effective_config(args: argparse.Namespace) -> ReportConfig:
    config = load_config(args.config) if args.config else DEFAULT_CONFIG
    overrides: dict[str, Any] = {}
    if getattr(args, "plugin_files", None):
        overrides["plugin_files"] = tuple(str(p) for p in args.plugin_files)
    if getattr(args, "cluster", None) is not None:
        overrides["cluster_file"] = str(args.cluster)
    if getattr(args, "no_cluster", False):
        overrides["cluster_file"] = None
    if getattr(args, "host", None) is not None:
        overrides["host"] = args.host
    if getattr(args, "port", None) is not None:
        overrides["port"] = args.port
    if getattr(args, "artifact_root", None) is not None:
        overrides["artifact_root"] = str(args.artifact_root)
    if getattr(args, "strict_health", False):
        overrides["strict_health"] = True
    return replace(config, **overrides) if overrides else config


def _load(config: ReportConfig) -> ReportModel:
    return load_report(
        config.plugin_files,
        config.cluster_file,
        strict_health=config.strict_health,
    )


def _summarize(config: ReportConfig, as_json: bool) -> None:
    """Load the artifacts and print statistics (table or JSON)."""
    start = perf_counter()
    try:
        model = _load(config)
        if as_json:
            print(json.dumps(model.to_dict(), indent=2, default=str))
        else:
            _print_summary(model)
    except FileNotFoundError as e:
        logger.error(f"Artifact file not found: {e.filename}")
        print(f"❌ ERROR: Artifact file not found: {e.filename}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Failed to summarize results: {type(e).__name__}: {e}")
        print(f"❌ ERROR: Failed to summarize results: {type(e).__name__}: {e}")
        sys.exit(1)
    logger.info(f"Summary completed in {_format_duration(perf_counter() - start)}")


def _report(
    config: ReportConfig, notebook: Optional[Path], html: Optional[Path]
) -> None:
    """Write notebook and/or static HTML renditions of the report."""
    from dumpreport.report import ReportGenerator

    if notebook is None and html is None:
        notebook = Path("report.ipynb")
    try:
        generator = ReportGenerator(_load(config))
        if notebook is not None:
            print(f"✅ Notebook written to: {generator.generate_notebook(notebook)}")
        if html is not None:
            print(f"✅ HTML report written to: {generator.generate_html_report(html)}")
    except FileNotFoundError as e:
        logger.error(f"Artifact file not found: {e.filename}")
        print(f"❌ ERROR: Artifact file not found: {e.filename}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Failed to generate report: {type(e).__name__}: {e}")
        print(f"❌ ERROR: Failed to generate report: {type(e).__name__}: {e}")
        sys.exit(1)


def _serve(config: ReportConfig) -> None:
    """Load the artifacts once and serve the report until interrupted."""
    import uvicorn

    from dumpreport.report_model import ReportHolder
    from dumpreport.server import create_app

    try:
        holder = ReportHolder(_load(config))
    except FileNotFoundError as e:
        logger.error(f"Artifact file not found: {e.filename}")
        print(f"❌ ERROR: Artifact file not found: {e.filename}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Failed to load results: {type(e).__name__}: {e}")
        print(f"❌ ERROR: Failed to load results: {type(e).__name__}: {e}")
        sys.exit(1)

    app = create_app(holder, config, reload=lambda: _load(config))
    logger.info(f"Serving report on http://{config.host}:{config.port}")
    uvicorn.run(app, host=config.host, port=config.port)


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``dumpreport`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="dumpreport",
        description="Summarize and browse test-run result dumps.",
    )

    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Only log warnings and errors"
    )
    parser.add_argument(
        "--config", "-c", type=Path, default=None, help="YAML configuration file"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{summarize,serve,report}",
        help="Available commands",
    )

    summarize_parser = subparsers.add_parser(
        "summarize", help="Print per-plugin statistics and cluster health"
    )
    summarize_parser.add_argument(
        "--json", action="store_true", help="Print the report as JSON"
    )

    serve_parser = subparsers.add_parser("serve", help="Serve the HTML report")
    serve_parser.add_argument("--host", default=None, help="Bind address")
    serve_parser.add_argument("--port", "-p", type=int, default=None, help="Port")
    serve_parser.add_argument(
        "--artifact-root",
        type=Path,
        default=None,
        help="Directory raw files may be served from (default: current directory)",
    )

    report_parser = subparsers.add_parser(
        "report", help="Write a notebook and/or static HTML report"
    )
    report_parser.add_argument(
        "--notebook", type=Path, default=None, help="Notebook output path"
    )
    report_parser.add_argument(
        "--html", type=Path, default=None, help="HTML output path"
    )

    for p in (summarize_parser, serve_parser, report_parser):
        p.add_argument(
            "plugin_files",
            nargs="*",
            type=Path,
            help="Plugin result dump files (default: from config)",
        )
        p.add_argument(
            "--cluster", type=Path, default=None, help="Cluster health dump file"
        )
        p.add_argument(
            "--no-cluster",
            action="store_true",
            help="Do not load a cluster health dump",
        )
        p.add_argument(
            "--strict-health",
            action="store_true",
            help="Fail on health records with no inspected units",
        )

    effective_args = sys.argv[1:] if argv is None else argv

    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)

    if args.verbose:
        set_global_log_level(logging.DEBUG)
        logger.debug("Debug logging enabled")
    elif args.quiet:
        set_global_log_level(logging.WARNING)
    else:
        set_global_log_level(logging.INFO)

    try:
        config = _effective_config(args)
    except Exception as e:
        logger.error(f"Invalid configuration: {e}")
        print(f"❌ ERROR: Invalid configuration: {e}")
        sys.exit(1)

    if args.command == "summarize":
        _summarize(config, as_json=args.json)
    elif args.command == "serve":
        _serve(config)
    elif args.command == "report":
        _report(config, notebook=args.notebook, html=args.html)


if __name__ == "__main__":
    main()
