"""Unit tests for core/render/stash.py"""

from issueblog.core.render.stash import MARKER, Stash


def test_put_returns_marker_wrapped_token():
    """Tokens are MARKER + prefix + index + MARKER."""
    stash = Stash("I")
    assert stash.put("<b>x</b>") == f"{MARKER}I0{MARKER}"
    assert stash.put("<i>y</i>") == f"{MARKER}I1{MARKER}"


def test_is_token_only_for_own_prefix():
    """A token from another stash is not recognised."""
    inline, code = Stash("I"), Stash("C")
    token = code.put("<pre></pre>")
    assert code.is_token(token)
    assert not inline.is_token(token)
    assert not code.is_token(f"x{token}")


def test_restore_is_recursive():
    """Fragments that contain tokens are restored all the way down."""
    stash = Stash("I")
    inner = stash.put("<em>a</em>")
    outer = stash.put(f"<strong>{inner}</strong>")
    assert stash.restore(f"[{outer}]") == "[<strong><em>a</em></strong>]"


def test_restore_leaves_plain_text():
    """Text without tokens comes back unchanged."""
    assert Stash("I").restore("plain & simple") == "plain & simple"
