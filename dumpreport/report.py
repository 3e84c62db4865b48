"""Report rendering.

HTML pages are rendered from the packaged jinja2 templates and are shared by
the web server and the static export. :class:`ReportGenerator` additionally
writes a Jupyter notebook with the same overview, for reading the results
next to further ad-hoc analysis.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, List

import nbformat
from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape

from dumpreport.health import format_health_rate
from dumpreport.logging import get_logger
from dumpreport.model.result import group_leaves_by_suite
from dumpreport.report_model import ReportModel
from dumpreport.results.summary import RunSummary
from dumpreport.types.base import Status

logger = get_logger(__name__)

_env = Environment(
    loader=PackageLoader("dumpreport", "templates"),
    autoescape=select_autoescape(["html"]),
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
)
_env.filters["health_rate"] = format_health_rate


def render_summary_html(model: ReportModel) -> str:
    """Render the overview page."""
    return _env.get_template("summary.html").render(model=model)


def render_tests_html(run: RunSummary, failures_only: bool = False) -> str:
    """Render every test of ``run`` grouped by suite, or only the failures."""
    groups = (
        group_leaves_by_suite(run.root, failures_only=failures_only)
        if run.root is not None
        else []
    )
    return _env.get_template("tests.html").render(
        run=run, groups=groups, failures_only=failures_only
    )


def _md_table(headers: List[str], rows: Iterable[List[Any]]) -> str:
    lines = [
        "| " + " | ".join(headers) + " |",
        "|" + "|".join("---" for _ in headers) + "|",
    ]
    for row in rows:
        lines.append("| " + " | ".join(str(cell) for cell in row) + " |")
    return "\n".join(lines)


class ReportGenerator:
    """Write notebook and static HTML renditions of a ReportModel."""

    def __init__(self, model: ReportModel):
        self.model = model

    def generate_notebook(self, output_path: Path = Path("report.ipynb")) -> Path:
        """Create a Jupyter notebook with the overview tables.

        Args:
            output_path: Target path for the notebook.

        Returns:
            The path to the written notebook file.
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)
        nb = self._create_notebook()
        with open(output_path, "w", encoding="utf-8") as f:
            nbformat.write(nb, f)
        logger.info(f"Notebook saved to: {output_path}")
        return output_path

    def generate_html_report(self, html_path: Path = Path("report.html")) -> Path:
        """Write the overview page as a standalone HTML file."""
        html_path.parent.mkdir(parents=True, exist_ok=True)
        html_path.write_text(render_summary_html(self.model), encoding="utf-8")
        logger.info(f"HTML report saved to: {html_path}")
        return html_path

    # -------------------- notebook construction --------------------

    def _create_notebook(self) -> nbformat.NotebookNode:
        nb = nbformat.v4.new_notebook()
        nb.cells.append(nbformat.v4.new_markdown_cell("# Results Report"))
        nb.cells.append(self._create_overview_cell())
        for run in self.model.runs:
            if run.available and run.summary.failed_names:
                nb.cells.append(self._create_failures_cell(run))
        nb.cells.append(self._create_health_cell())
        nb.cells.append(self._create_loading_cell())
        return nb

    def _create_overview_cell(self) -> nbformat.NotebookNode:
        statuses = list(Status)
        rows = []
        for run in self.model.runs:
            if not run.available:
                rows.append([run.name, "unavailable", "", *["" for _ in statuses]])
                continue
            rows.append(
                [
                    run.name,
                    run.declared_status or "",
                    run.summary.total,
                    *[run.summary.count(s) for s in statuses],
                ]
            )
        table = _md_table(
            ["Plugin", "Status", "Total", *[s.value for s in statuses]], rows
        )
        return nbformat.v4.new_markdown_cell(f"## Plugins\n\n{table}")

    def _create_failures_cell(self, run: RunSummary) -> nbformat.NotebookNode:
        items = "\n".join(f"- {name}" for name in run.summary.failed_names)
        return nbformat.v4.new_markdown_cell(
            f"### Failed tests: {run.name}\n\n{items}"
        )

    def _create_health_cell(self) -> nbformat.NotebookNode:
        cluster = self.model.cluster
        rows = [
            [
                "Nodes",
                cluster.node_health.healthy,
                cluster.node_health.total,
                format_health_rate(self.model.node_health_rate),
            ],
            [
                "Pods",
                cluster.pod_health.healthy,
                cluster.pod_health.total,
                format_health_rate(self.model.pod_health_rate),
            ],
        ]
        parts = [
            "## Cluster health",
            f"API Server version: {cluster.api_version}",
            _md_table(["Dimension", "Healthy", "Total", "Rate"], rows),
        ]
        if cluster.error_summary:
            error_rows = [
                [category, location, count]
                for category, hits in sorted(cluster.error_summary.items())
                for location, count in sorted(hits.items())
            ]
            parts.append(_md_table(["Error", "File", "Count"], error_rows))
        return nbformat.v4.new_markdown_cell("\n\n".join(parts))

    def _create_loading_cell(self) -> nbformat.NotebookNode:
        plugin_files = [run.source for run in self.model.runs]
        cluster_file = self.model.cluster_source or None
        code = f"""# Reload the artifacts for further analysis
from dumpreport import load_report

model = load_report({plugin_files!r}, {cluster_file!r})
for run in model:
    print(run.name, run.summary.to_dict() if run.available else run.error)"""
        return nbformat.v4.new_code_cell(code)
