# -*- coding: utf-8 -*-
"""Upload page: drag and drop or file picker, posting to ``/upload``."""

from __future__ import annotations

from string import Template
from typing import Optional

from chromaleap.config import DEFAULT_MAX_UPLOAD_BYTES
from chromaleap.ui.layout import render_page
from chromaleap.ui.upload_flow import format_size_limit

# The script only moves dropped files into the form and locks the dropzone
# while the request is in flight; the flow itself runs on the server.
UPLOAD_SCRIPT = """
(function () {
  var form = document.getElementById('upload-form');
  var zone = document.getElementById('dropzone');
  var input = document.getElementById('image-input');
  var status = document.getElementById('upload-status');
  function submit() {
    zone.classList.add('busy');
    status.textContent = 'Uploading... then analyzing the editing pipeline';
    form.submit();
  }
  zone.addEventListener('click', function () { input.click(); });
  zone.addEventListener('dragover', function (e) { e.preventDefault(); zone.classList.add('dragging'); });
  zone.addEventListener('dragleave', function () { zone.classList.remove('dragging'); });
  zone.addEventListener('drop', function (e) {
    e.preventDefault();
    zone.classList.remove('dragging');
    if (zone.classList.contains('busy')) { return; }
    input.files = e.dataTransfer.files;
    submit();
  });
  input.addEventListener('change', function () { if (input.files.length) { submit(); } });
})();
"""

UPLOAD_BODY = Template(
    """
<section class="center">
    <h2>Reverse Engineer Any Edit</h2>
    <p class="muted">Upload an image and let AI analyze the post-processing pipeline,
    extracting effects, parameters, and software suggestions.</p>
</section>
<form id="upload-form" action="/upload" method="post" enctype="multipart/form-data">
    <div id="dropzone" class="dropzone">
        <h3>Drop your image here</h3>
        <p class="muted">or click to browse files</p>
        <p class="muted">Supports JPG, PNG, WEBP (max $max_size)</p>
        <span class="button">Select Image</span>
        <p id="upload-status" class="muted" aria-live="polite"></p>
    </div>
    <input id="image-input" type="file" name="images" accept="image/*" multiple hidden />
</form>
"""
)


def render_upload_page(
    error: Optional[str] = None,
    notice: Optional[str] = None,
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
) -> str:
    upload_body = UPLOAD_BODY.substitute(max_size=format_size_limit(max_upload_bytes))
    body = f"{upload_body}<script>{UPLOAD_SCRIPT}</script>"
    return render_page("Upload", body, error=error, notice=notice)


__all__ = ["render_upload_page"]
