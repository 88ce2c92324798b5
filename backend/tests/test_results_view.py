"""Tests for result rendering and JSON export."""
import json
import re
from urllib.parse import unquote

from chromaleap.models import AnalysisResult
from chromaleap.ui import AnalysisSession, export_analysis
from chromaleap.ui.results_view import (
    category_style,
    export_data_uri,
    format_confidence,
    format_parameter_value,
    render_results,
)

from conftest import SCENARIO_ANALYSIS


def _session(analysis, image_url="https://x/test.jpg"):
    session = AnalysisSession()
    session.complete(analysis, image_url)
    return session


class TestExport:
    def test_export_round_trip(self):
        """Exported JSON re-imports to an equal value."""
        analysis = dict(SCENARIO_ANALYSIS, extra_field={"nested": [1, 2.5, None]})

        filename, content = export_analysis(analysis, timestamp_ms=1700000000000)

        assert filename == "chromaleap-analysis-1700000000000.json"
        assert json.loads(content.decode("utf-8")) == analysis

    def test_export_filename_uses_current_time(self):
        filename, _ = export_analysis({})

        assert re.fullmatch(r"chromaleap-analysis-\d{13}\.json", filename)

    def test_data_uri_carries_pretty_json(self):
        uri = export_data_uri(SCENARIO_ANALYSIS)

        prefix = "data:application/json;charset=utf-8,"
        assert uri.startswith(prefix)
        decoded = unquote(uri[len(prefix):])
        assert decoded == json.dumps(SCENARIO_ANALYSIS, indent=2, ensure_ascii=False)

    def test_export_name_is_stamped_on_click(self):
        """The page renames the download with the click time."""
        html = render_results(_session(SCENARIO_ANALYSIS))

        assert '<a id="export-json"' in html
        assert "getElementById('export-json')" in html
        assert "'chromaleap-analysis-' + Date.now() + '.json'" in html


class TestRendering:
    def test_steps_keep_array_order(self):
        """Steps are listed as stored, not re-sorted by step_order."""
        analysis = {
            "hypothesized_pipeline": [
                {"step_order": 3, "effect_name": "Vignette", "effect_category": "Finishing"},
                {"step_order": 1, "effect_name": "Exposure", "effect_category": "Basic Correction"},
            ]
        }

        html = render_results(_session(analysis))
        steps_html = html.split("Editing Pipeline", 1)[1]

        assert steps_html.index("Vignette") < steps_html.index("Exposure")
        assert "Identified 2 editing steps" in html

    def test_parameters_render_generically(self):
        analysis = {
            "hypothesized_pipeline": [
                {
                    "effect_name": "Curves",
                    "estimated_parameters": {"curve_points": [[0, 0], [128, 140]], "strength": 0.4},
                }
            ]
        }

        html = render_results(_session(analysis))

        assert "curve points" in html
        assert "[[0, 0], [128, 140]]" in html
        assert "0.4" in html

    def test_missing_fields_render_safely(self):
        """Absent pipeline, metadata and confidence do not break rendering."""
        html = render_results(_session({"unexpected": True}))

        assert "Identified 0 editing steps" in html
        assert "Analyzed by unknown" in html

        html = render_results(_session({"hypothesized_pipeline": [{"effect_name": "Grain"}]}))
        assert "n/a" in html

    def test_text_is_escaped(self):
        analysis = {"hypothesized_pipeline": [{"effect_name": "<script>alert(1)</script>"}]}

        html = render_results(_session(analysis, image_url='https://x/a.jpg" onerror="x'))

        assert "<script>alert(1)</script>" not in html
        assert "&lt;script&gt;" in html
        assert 'onerror="x' not in html

    def test_unknown_category_falls_back(self):
        assert category_style("Glitch Art") == category_style("Basic Correction")
        assert category_style("Color Grade") != category_style("Tonal Adjustment")

    def test_value_formatting(self):
        assert format_parameter_value({"r": 1}) == '{"r": 1}'
        assert format_parameter_value("+0.5") == "+0.5"
        assert format_parameter_value(12) == "12"
        assert format_confidence(0.8) == "80% confident"
        assert format_confidence(None) == "n/a"


class TestAnalysisResultView:
    def test_tolerant_parsing(self):
        view = AnalysisResult.from_payload(
            {
                "analysis_metadata": "oops",
                "hypothesized_pipeline": [
                    {"step_order": "2", "software_guess": "Photoshop", "confidence": "high"},
                    "not a step",
                ],
            }
        )

        assert view.analysis_metadata.analysis_engine is None
        assert len(view.hypothesized_pipeline) == 1
        step = view.hypothesized_pipeline[0]
        assert step.step_order == 2
        assert step.software_guess == ["Photoshop"]
        assert step.estimated_parameters == {}
        assert step.confidence is None

    def test_non_object_payload_is_empty(self):
        assert AnalysisResult.from_payload([1, 2]).hypothesized_pipeline == []
