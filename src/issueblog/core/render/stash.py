"""Placeholder side-table for finished HTML fragments that later passes must not touch"""

import re


MARKER = '\x00'


class Stash:
    """Indexed store of HTML fragments, each represented in the text by a neutral token.

    A token is MARKER + prefix + index + MARKER. No markdown or escaping rule
    matches those characters, so tokens survive every later substitution and are
    swapped back by restore(). Callers must strip MARKER from user input first.
    """

    def __init__(self, prefix: str):
        self.prefix = prefix
        self._fragments: list[str] = []
        self._token_re = re.compile(f'{MARKER}{re.escape(prefix)}(\\d+){MARKER}')

    def __len__(self) -> int:
        return len(self._fragments)

    def put(self, fragment: str) -> str:
        """Store fragment and return the token that stands in for it."""
        self._fragments.append(fragment)
        return f'{MARKER}{self.prefix}{len(self._fragments) - 1}{MARKER}'

    def is_token(self, text: str) -> bool:
        return self._token_re.fullmatch(text) is not None

    def restore(self, text: str) -> str:
        """Replace every token with its fragment, including tokens nested in fragments."""
        return self._token_re.sub(lambda m: self.restore(self._fragments[int(m.group(1))]), text)
