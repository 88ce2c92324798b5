# -*- coding: utf-8 -*-
"""Shared HTML shell for the server rendered pages."""

from __future__ import annotations

from html import escape
from string import Template
from typing import Optional

PAGE_CSS = """
body { margin: 0; font-family: system-ui, sans-serif; background: #0f172a; color: #e2e8f0; }
header.top { border-bottom: 1px solid #1e293b; padding: 1.5rem 2rem; }
header.top h1 { margin: 0; font-size: 1.5rem; color: #a5b4fc; }
main { max-width: 960px; margin: 0 auto; padding: 2rem; }
.muted { color: #94a3b8; }
.center { text-align: center; }
.alert { border-radius: 8px; padding: 0.75rem 1rem; margin-bottom: 1.5rem; }
.alert.error { background: #7f1d1d; }
.alert.notice { background: #14532d; }
.dropzone { border: 2px dashed #334155; border-radius: 12px; padding: 3rem; text-align: center; cursor: pointer; }
.dropzone.dragging { border-color: #6366f1; background: #1e1b4b; }
.dropzone.busy { pointer-events: none; opacity: 0.7; }
.button { display: inline-block; border: 1px solid #6366f1; border-radius: 6px; padding: 0.5rem 1rem; color: #e2e8f0; text-decoration: none; background: none; }
.results-header { display: flex; justify-content: space-between; align-items: flex-start; gap: 1rem; }
.preview img { width: 100%; max-height: 24rem; object-fit: contain; }
.step-card { border: 2px solid #1e293b; border-radius: 10px; padding: 1rem; margin-bottom: 1rem; }
.step-header { display: flex; gap: 1rem; align-items: flex-start; }
.step-title { flex: 1; }
.step-title h3 { margin: 0 0 0.5rem; }
.step-order { font-weight: bold; font-size: 1.1rem; border: 1px solid #334155; border-radius: 6px; padding: 0.2rem 0.7rem; }
.badge { display: inline-block; border: 1px solid #334155; border-radius: 999px; padding: 0.1rem 0.6rem; margin: 0 0.3rem 0.3rem 0; font-size: 0.85rem; }
.param-grid { display: grid; grid-template-columns: repeat(auto-fill, minmax(200px, 1fr)); gap: 0.75rem; }
.param { background: #1e293b; border-radius: 8px; padding: 0.75rem; }
.param-label { margin: 0 0 0.25rem; font-size: 0.75rem; text-transform: uppercase; color: #94a3b8; }
.param-value { margin: 0; font-family: monospace; font-weight: 600; }
"""

_PAGE_TEMPLATE = Template(
    """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>$title - ChromaLeap Analyst</title>
    <style>$css</style>
</head>
<body>
    <header class="top">
        <h1>ChromaLeap Analyst</h1>
        <p class="muted">AI-Powered Image Effect Reverse Engineering</p>
    </header>
    <main>
        $alerts
        $body
    </main>
</body>
</html>
"""
)


def render_page(title: str, body: str, *, notice: Optional[str] = None, error: Optional[str] = None) -> str:
    alerts = []
    if error:
        alerts.append(f'<div class="alert error" role="alert"><strong>Error:</strong> {escape(error)}</div>')
    if notice:
        alerts.append(f'<div class="alert notice" role="status">{escape(notice)}</div>')
    return _PAGE_TEMPLATE.substitute(
        title=escape(title),
        css=PAGE_CSS,
        alerts="".join(alerts),
        body=body,
    )
