import html
import io
import logging
import re
import tokenize
from typing import List, Optional, Tuple

from core.models import ByteRange

logger = logging.getLogger(__name__)

# Undecodable bytes survive decoding as lone surrogates U+DC80..U+DCFF
_RAW_RE = re.compile("[\r\udc80-\udcff]")


def _escape(text: str) -> str:
    """HTML-escape text, keeping byte offsets recoverable in the browser.

    Carriage returns become ``&#13;``, which the HTML parser does not fold
    into the following newline. Each undecodable byte becomes a U+FFFD
    wrapped in ``<span class="invalid">`` so the page script can count it
    as a single byte.
    """
    def raw(m: re.Match) -> str:
        if m.group() == "\r":
            return "&#13;"
        return '<span class="invalid">\ufffd</span>'

    return _RAW_RE.sub(raw, html.escape(text, quote=False))


def comment_ranges(content: bytes) -> List[Tuple[int, int]]:
    """Return the byte ranges of all Python comments in ``content``.

    Returns an empty list if the content does not tokenize.
    """
    starts = [0]
    for i, b in enumerate(content):
        if b == 0x0A:
            starts.append(i + 1)

    ranges: List[Tuple[int, int]] = []
    encoding = "utf-8"
    try:
        for tok in tokenize.tokenize(io.BytesIO(content).readline):
            if tok.type == tokenize.ENCODING:
                encoding = tok.string
            elif tok.type == tokenize.COMMENT:
                row, col = tok.start
                begin = starts[row - 1]
                end = starts[row] if row < len(starts) else len(content)
                line = content[begin:end].decode(encoding)
                start = begin + len(line[:col].encode(encoding))
                ranges.append((start, start + len(tok.string.encode(encoding))))
    except (tokenize.TokenError, SyntaxError, UnicodeDecodeError) as e:
        logger.debug("Not highlighting comments: %s", e)
        return []
    return ranges


def format_source(content: bytes, selection: Optional[ByteRange] = None, highlight_comments: bool = True) -> str:
    """Render file content as an HTML fragment.

    Comments are wrapped in ``<span class="comment">`` and the selection in
    ``<span class="selection">``; text covered by both gets both classes.
    """
    comments = comment_ranges(content) if highlight_comments else []
    bounds = {0, len(content)}
    for start, end in comments:
        bounds.update((start, end))
    if selection is not None:
        bounds.update((selection.start, selection.end))
    points = sorted(b for b in bounds if 0 <= b <= len(content))

    out: List[str] = []
    ci = 0
    for a, b in zip(points, points[1:]):
        while ci < len(comments) and comments[ci][1] <= a:
            ci += 1
        classes = []
        if ci < len(comments) and comments[ci][0] <= a:
            classes.append("comment")
        if selection is not None and selection.start <= a and b <= selection.end:
            classes.append("selection")
        text = _escape(content[a:b].decode("utf-8", errors="surrogateescape"))
        if classes:
            out.append(f'<span class="{" ".join(classes)}">{text}</span>')
        else:
            out.append(text)
    return "".join(out)
