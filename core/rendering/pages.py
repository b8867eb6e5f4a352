"""HTML pages for the browser workspace."""

from __future__ import annotations

import json
import os
from html import escape
from itertools import groupby
from typing import Iterable, List
from urllib.parse import urlencode

_PAGE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{title}</title>
<link rel="stylesheet" href="/static/style.css">
</head>
<body>
{body}
</body>
</html>
"""


def source_url(file: str, selection: str = "") -> str:
    params = {"file": file}
    if selection:
        params["s"] = selection
    return "/source?" + urlencode(params)


def render_index(scope_description: str, files: Iterable[str]) -> str:
    """Render the scope index: every in-scope file, grouped by directory."""
    sections: List[str] = []
    for directory, group in groupby(sorted(files, key=lambda f: (os.path.dirname(f), f)), key=os.path.dirname):
        items = "\n".join(
            f'<li><a href="{escape(source_url(f))}">{escape(os.path.basename(f))}</a></li>' for f in group
        )
        sections.append(f"<h2>{escape(directory)}</h2>\n<ul>\n{items}\n</ul>")
    body = (
        f"<h1>Pythia</h1>\n"
        f'<p class="scope">Scope: <code>{escape(scope_description)}</code></p>\n'
        + ("\n".join(sections) if sections else "<p>No files in scope.</p>")
    )
    return _PAGE.format(title="Pythia", body=body)


def render_source_page(file: str, modes: Iterable[str]) -> str:
    """Render the workspace page for one file.

    The file content is fetched by the page's script from ``/file``.
    """
    buttons = "\n".join(
        f'<button type="button" data-mode="{escape(mode)}">{escape(mode)}</button>' for mode in modes
    )
    config = json.dumps({"file": file}).replace("<", "\\u003c")
    body = (
        f'<p class="nav"><a href="/">&larr; scope</a> <span class="path">{escape(file)}</span></p>\n'
        f'<div class="modes">\n{buttons}\n</div>\n'
        f'<pre id="source" class="source"></pre>\n'
        f'<pre id="output" class="output"></pre>\n'
        f'<script>var pythia = {config};</script>\n'
        f'<script src="/static/pythia.js"></script>'
    )
    return _PAGE.format(title=f"{escape(os.path.basename(file))} - Pythia", body=body)
