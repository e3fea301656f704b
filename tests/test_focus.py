"""Tests for focus path computations."""

from __future__ import annotations

from termtree import focus
from termtree.view import Direction, Selector
from termtree.views import LinearLayout, TextView
from termtree.wrapper import named


def _tree(make_view):
    """
    Build::

        vertical
        ├── a
        ├── horizontal
        │   ├── b
        │   └── c
        └── d (not focusable)
    """
    a, b, c = make_view("a"), make_view("b"), make_view("c")
    d = make_view("d", focusable=False)
    root = LinearLayout.vertical([a, LinearLayout.horizontal([b, c]), d])
    return root, (a, b, c, d)


class TestCandidates:
    """Tests for focusable_paths and accepts."""

    def test_paths_in_depth_first_order(self, make_view) -> None:
        """Focusable leaves are listed in depth-first order."""
        root, _ = _tree(make_view)
        assert focus.focusable_paths(root) == [(0,), (1, 0), (1, 1)]

    def test_unfocusable_subtree_contributes_nothing(self, make_view) -> None:
        """A container without focusable leaves adds no candidates."""
        root = LinearLayout.vertical(
            [LinearLayout.horizontal([make_view("x", focusable=False)]), make_view("y")]
        )
        assert focus.focusable_paths(root) == [(1,)]

    def test_accepts_requires_a_focusable_leaf(self, make_view) -> None:
        """Only paths ending at a focusable leaf are accepted."""
        root, _ = _tree(make_view)
        assert focus.accepts(root, (1, 0))
        assert not focus.accepts(root, (1,))
        assert not focus.accepts(root, (2,))
        assert not focus.accepts(root, (5,))

    def test_resolve(self, make_view) -> None:
        """resolve walks a path and returns None past the end of the tree."""
        root, (a, b, c, d) = _tree(make_view)
        assert focus.resolve(root, (1, 1)) is c
        assert focus.resolve(root, ()) is root
        assert focus.resolve(root, (1, 7)) is None

    def test_text_views_do_not_take_focus(self) -> None:
        """TextView never takes focus."""
        assert focus.focusable_paths(LinearLayout.vertical([TextView("a")])) == []


class TestNavigation:
    """Tests for next_focus."""

    def test_forward_wraps(self, make_view) -> None:
        """FORWARD moves to the next leaf and wraps past the last."""
        root, _ = _tree(make_view)
        assert focus.next_focus(root, (0,), Direction.FORWARD) == (1, 0)
        assert focus.next_focus(root, (1, 1), Direction.FORWARD) == (0,)

    def test_forward_without_wrap_stays(self, make_view) -> None:
        """Without wrap, FORWARD stays on the last leaf."""
        root, _ = _tree(make_view)
        assert focus.next_focus(root, (1, 1), Direction.FORWARD, wrap=False) == (1, 1)

    def test_backward(self, make_view) -> None:
        """BACKWARD moves to the previous leaf and wraps past the first."""
        root, _ = _tree(make_view)
        assert focus.next_focus(root, (1, 0), Direction.BACKWARD) == (0,)
        assert focus.next_focus(root, (0,), Direction.BACKWARD) == (1, 1)
        assert focus.next_focus(root, (0,), Direction.BACKWARD, wrap=False) == (0,)

    def test_from_nothing(self, make_view) -> None:
        """With no focus, FORWARD picks the first leaf and BACKWARD the last."""
        root, _ = _tree(make_view)
        assert focus.next_focus(root, None, Direction.FORWARD) == (0,)
        assert focus.next_focus(root, None, Direction.BACKWARD) == (1, 1)
        assert focus.next_focus(root, None, Direction.NONE) == (0,)

    def test_none_keeps_valid_path(self, make_view) -> None:
        """NONE keeps a valid path and replaces an invalid one."""
        root, _ = _tree(make_view)
        assert focus.next_focus(root, (1, 1), Direction.NONE) == (1, 1)
        assert focus.next_focus(root, (2,), Direction.NONE) == (0,)

    def test_full_cycle_is_deterministic(self, make_view) -> None:
        """Stepping forward once per candidate returns to the start."""
        root, _ = _tree(make_view)
        seen = []
        path = (0,)
        for _ in range(3):
            path = focus.next_focus(root, path, Direction.FORWARD)
            seen.append(path)
        assert seen == [(1, 0), (1, 1), (0,)]

    def test_no_candidates_keeps_current(self, make_view) -> None:
        """A tree with no focusable leaf yields no focus."""
        root = LinearLayout.vertical([make_view("x", focusable=False)])
        assert focus.next_focus(root, None, Direction.FORWARD) is None

    def test_nearest_focus(self, make_view) -> None:
        """nearest_focus prefers the old path, then its neighbours."""
        root, _ = _tree(make_view)
        assert focus.nearest_focus(root, (1, 0)) == (1, 0)
        assert focus.nearest_focus(root, (0, 3)) == (1, 0)
        assert focus.nearest_focus(root, (2,)) == (1, 1)


class TestLookup:
    """Tests for path_of and find_path."""

    def test_path_of_uses_identity(self, make_view) -> None:
        """path_of matches views by identity, not equality."""
        root, (a, b, c, d) = _tree(make_view)
        assert focus.path_of(root, c) == (1, 1)
        assert focus.path_of(root, make_view("c")) is None

    def test_named_wrapper_shares_inner_path(self, make_view) -> None:
        """A named wrapper and its inner view share one path."""
        target = make_view("target")
        root = LinearLayout.vertical([make_view("a"), named("target", target)])
        assert focus.find_path(root, Selector.name("target")) == (1,)
        assert focus.path_of(root, target) == (1,)
        assert focus.resolve(root, (1,)).get_inner() is target

    def test_find_path_missing(self, make_view) -> None:
        """find_path returns None when nothing matches."""
        root, _ = _tree(make_view)
        assert focus.find_path(root, Selector.name("nope")) is None
