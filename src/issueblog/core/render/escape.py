"""HTML escaping for rendered text, code, and generated attribute values"""

import html
import re


# '&' that does not already start a named or numeric character reference
BARE_AMP_RE = re.compile(r'&(?!#[0-9]{1,7};|#[xX][0-9a-fA-F]{1,6};|[A-Za-z][A-Za-z0-9]{1,31};)')


def escape_text(text: str) -> str:
    """Escape &, <, > and " exactly once; existing entity references pass through."""
    text = BARE_AMP_RE.sub('&amp;', text)
    return text.replace('<', '&lt;').replace('>', '&gt;').replace('"', '&quot;')


def escape_code(text: str) -> str:
    """Escape literal code; every '&' is escaped since code shows entities verbatim."""
    return html.escape(text, quote=False)


def quote_attr(value: str) -> str:
    """Make a raw URL safe inside a double-quoted attribute. No other rewriting."""
    return value.replace('"', '&quot;')
