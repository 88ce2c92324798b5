# -*- coding: utf-8 -*-
"""HTML rendering of an analysis result and its JSON export."""

from __future__ import annotations

import json
import time
from html import escape
from string import Template
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

from chromaleap.models import PipelineStep
from chromaleap.ui.layout import render_page
from chromaleap.ui.session import AnalysisSession

DEFAULT_CATEGORY = "Basic Correction"

CATEGORY_STYLES: Dict[str, Dict[str, str]] = {
    "Basic Correction": {"icon": "✨", "color": "#22d3ee"},
    "Tonal Adjustment": {"icon": "◐", "color": "#a855f7"},
    "Color Grade": {"icon": "🎨", "color": "#6366f1"},
    "Finishing": {"icon": "✨", "color": "#22d3ee"},
}


def category_style(category: str) -> Dict[str, str]:
    return CATEGORY_STYLES.get(category, CATEGORY_STYLES[DEFAULT_CATEGORY])


def format_parameter_label(key: str) -> str:
    return key.replace("_", " ")


def format_parameter_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def format_confidence(confidence: Optional[float]) -> str:
    if confidence is None:
        return "n/a"
    return f"{confidence * 100:.0f}% confident"


EXPORT_PREFIX = "chromaleap-analysis-"

# The download name is stamped again when the link is clicked.
EXPORT_SCRIPT = """
(function () {
  var link = document.getElementById('export-json');
  link.addEventListener('click', function () {
    link.download = '%s' + Date.now() + '.json';
  });
})();
""" % EXPORT_PREFIX


def export_filename(timestamp_ms: Optional[int] = None) -> str:
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{EXPORT_PREFIX}{timestamp_ms}.json"


def export_analysis(analysis: Any, timestamp_ms: Optional[int] = None) -> Tuple[str, bytes]:
    """Serialize the full analysis for download as ``(filename, content)``."""

    content = json.dumps(analysis, indent=2, ensure_ascii=False)
    return export_filename(timestamp_ms), content.encode("utf-8")


def export_data_uri(analysis: Any) -> str:
    _, content = export_analysis(analysis)
    return "data:application/json;charset=utf-8," + quote(content.decode("utf-8"), safe="")


def _build_parameters_html(parameters: Dict[str, Any]) -> str:
    if not parameters:
        return ""
    cells = "".join(
        """
        <div class="param">
            <p class="param-label">{label}</p>
            <p class="param-value">{value}</p>
        </div>
        """.strip().format(
            label=escape(format_parameter_label(key)),
            value=escape(format_parameter_value(value)),
        )
        for key, value in parameters.items()
    )
    return f'<p class="muted">Estimated Parameters:</p><div class="param-grid">{cells}</div>'


def _build_step_html(step: PipelineStep) -> str:
    style = category_style(step.effect_category)
    software = "".join(f'<span class="badge">{escape(name)}</span>' for name in step.software_guess)
    step_order = "" if step.step_order is None else str(step.step_order)
    return """
    <article class="step-card">
        <header class="step-header">
            <span class="step-order">{order}</span>
            <div class="step-title">
                <h3>{icon} {name}</h3>
                <span class="badge category" style="border-color: {color}; color: {color}">{category}</span>
            </div>
            <span class="badge confidence">{confidence}</span>
        </header>
        <p class="muted">Likely Software:</p>
        <div class="badges">{software}</div>
        {parameters}
    </article>
    """.strip().format(
        order=escape(step_order),
        icon=style["icon"],
        name=escape(step.effect_name),
        color=style["color"],
        category=escape(step.effect_category),
        confidence=escape(format_confidence(step.confidence)),
        software=software,
        parameters=_build_parameters_html(step.estimated_parameters),
    )


_RESULTS_TEMPLATE = Template(
    """
<section class="results">
    <div class="results-header">
        <div>
            <h2>Analysis Results</h2>
            <p class="muted">Identified $step_count editing steps &bull; Analyzed by $engine</p>
        </div>
        <a id="export-json" class="button" href="$export_uri" download="$export_name">Export JSON</a>
    </div>
    <div class="preview"><img src="$image_url" alt="Analyzed" /></div>
    <h3>Editing Pipeline</h3>
    <div class="steps">
        $steps
    </div>
    <p class="center"><a href="/">&larr; Analyze another image</a></p>
</section>
<script>$export_script</script>
"""
)


def render_results(session: AnalysisSession) -> str:
    """Render the result body for the session's analysis.

    Steps keep the order of the stored array; ``step_order`` is only shown.
    """

    view = session.view
    steps: List[str] = [_build_step_html(step) for step in view.hypothesized_pipeline]
    return _RESULTS_TEMPLATE.substitute(
        step_count=len(view.hypothesized_pipeline),
        engine=escape(view.analysis_metadata.analysis_engine or "unknown"),
        export_uri=escape(export_data_uri(session.analysis)),
        export_name=escape(export_filename()),
        export_script=EXPORT_SCRIPT,
        image_url=escape(session.image_url),
        steps="\n".join(steps) or '<p class="muted">No editing steps were identified.</p>',
    ).strip()


def render_results_page(session: AnalysisSession, notice: Optional[str] = None) -> str:
    return render_page("Analysis Results", render_results(session), notice=notice)


__all__ = [
    "CATEGORY_STYLES",
    "EXPORT_PREFIX",
    "category_style",
    "export_analysis",
    "export_data_uri",
    "export_filename",
    "format_confidence",
    "format_parameter_label",
    "format_parameter_value",
    "render_results",
    "render_results_page",
]
