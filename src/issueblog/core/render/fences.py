"""Fenced code block extraction, run before any block segmentation"""

import re

from issueblog.core.render.escape import escape_code
from issueblog.core.render.stash import Stash


# Opening line: ``` plus optional language tag; closing line: ``` alone.
FENCE_OPEN_RE = re.compile(r'^```[ \t]*([\w+#.-]+)?[^\n`]*\n', re.MULTILINE)
FENCE_CLOSE_RE = re.compile(r'^```[ \t]*$', re.MULTILINE)


def code_block_html(code: str, lang: str | None = None) -> str:
    """Wrap escaped code in <pre><code>, with a language class when a tag is given."""
    css = f' class="language-{lang}"' if lang else ''
    return f'<pre><code{css}>{escape_code(code.strip(chr(10)))}</code></pre>'


def extract_code_blocks(markdown: str, stash: Stash) -> str:
    """Replace each fenced region with a stashed <pre><code> fragment.

    Regions are taken left to right, each closed by the first closing line after
    it. The token is padded with blank lines so the fragment always lands in a
    unit of its own, even when the author wrote the fence flush against a paragraph.
    """
    parts: list[str] = []
    pos = 0
    while (opening := FENCE_OPEN_RE.search(markdown, pos)) is not None:
        closing = FENCE_CLOSE_RE.search(markdown, opening.end())
        if closing is None:
            # no later opener can be closed either; the rest stays literal
            break
        code = markdown[opening.end():closing.start()]
        parts.append(markdown[pos:opening.start()])
        parts.append(f'\n\n{stash.put(code_block_html(code, opening.group(1)))}\n\n')
        pos = closing.end()
    parts.append(markdown[pos:])
    return ''.join(parts)
