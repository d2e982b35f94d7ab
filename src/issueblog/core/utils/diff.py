"""Pure utility for generating unified diffs between two text strings"""

import difflib


def unified_diff(
    old: str,
    new: str,
    from_label: str = "version_a",
    to_label: str = "version_b",
    context: int = 3,
    ) -> list[str]:
    """Return unified diff lines comparing old to new. Empty list if identical.

    Returns a list of lines; join with '' for display (lines already include newlines).
    """
    old_lines = old.splitlines(keepends=True)
    new_lines = new.splitlines(keepends=True)
    return list(
        difflib.unified_diff(old_lines, new_lines, fromfile=from_label, tofile=to_label, n=context)
    )
