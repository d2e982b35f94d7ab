"""Markdown to HTML fragment rendering for issue bodies"""

from issueblog.core.models import Block
from issueblog.core.render.blocks import classify_block, render_block, split_units
from issueblog.core.render.fences import extract_code_blocks
from issueblog.core.render.stash import MARKER, Stash


def normalize(markdown: str) -> str:
    """Unify line endings and drop the placeholder marker character from user input."""
    return markdown.replace('\r\n', '\n').replace('\r', '\n').replace(MARKER, '\ufffd')


def parse_blocks(markdown: str) -> tuple[list[Block], Stash]:
    """Extract fenced code, then segment and classify. Returns (blocks, code stash)."""
    stash = Stash('C')
    text = extract_code_blocks(normalize(markdown), stash)
    return [classify_block(unit, stash) for unit in split_units(text)], stash


def render(markdown: str) -> str:
    """Render markdown to an HTML fragment; never raises for malformed input."""
    if not markdown:
        return ''
    blocks, stash = parse_blocks(markdown)
    return stash.restore('\n\n'.join(render_block(b) for b in blocks))
