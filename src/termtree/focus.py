"""
Focus tracking over a view tree.

Focus paths are tuples of indices into :meth:`View.children`, from a
layer's root view down to the focused leaf.  The root itself is ``()``.
Every function here is pure: the state lives in
:class:`~termtree.screen.Layer` objects and this module only computes
over it.

Depth-first order of leaves equals lexicographic order of their paths,
which is what makes navigation deterministic.
"""

from __future__ import annotations

from collections.abc import Iterator

from termtree.view import Direction, Selector, View
from termtree.wrapper import ViewWrapper

Path = tuple[int, ...]


def resolve(root: View, path: Path) -> View | None:
    """Return the view at *path*, or ``None`` if any index is stale."""
    view = root
    for index in path:
        children = view.children()
        if not 0 <= index < len(children):
            return None
        view = children[index]
    return view


def _walk(view: View, prefix: Path, direction: Direction) -> Iterator[Path]:
    children = view.children()
    if not children:
        if view.take_focus(direction):
            yield prefix
        return
    if not view.take_focus(direction):
        return
    for index, child in enumerate(children):
        yield from _walk(child, prefix + (index,), direction)


def focusable_paths(root: View, direction: Direction = Direction.NONE) -> list[Path]:
    """Paths of every leaf accepting focus from *direction*, depth first."""
    return list(_walk(root, (), direction))


def accepts(root: View, path: Path, direction: Direction = Direction.NONE) -> bool:
    """
    Whether *path* resolves and every view along it accepts focus.

    The last view must be a leaf.
    """
    view = root
    if not view.take_focus(direction):
        return False
    for index in path:
        children = view.children()
        if not 0 <= index < len(children):
            return False
        view = children[index]
        if not view.take_focus(direction):
            return False
    return not view.children()


def next_focus(
    root: View,
    current: Path | None,
    direction: Direction,
    wrap: bool = True,
) -> Path | None:
    """
    Compute where focus goes when moving in *direction* from *current*.

    Parameters
    ----------
    root:
        Root view of the layer.
    current:
        Current path, or ``None`` when nothing is focused.
    direction:
        ``FORWARD`` and ``BACKWARD`` step through focusable leaves;
        ``NONE`` keeps a still-valid *current* and otherwise picks the
        first candidate.
    wrap:
        Whether stepping past either end continues at the other end.

    Returns
    -------
    The new path, or *current* unchanged when there is nowhere to go.
    """
    candidates = focusable_paths(root, direction)
    if not candidates:
        return current

    if direction is Direction.NONE:
        if current is not None and current in candidates:
            return current
        return candidates[0]

    if current is None:
        return candidates[0] if direction is Direction.FORWARD else candidates[-1]

    if direction is Direction.FORWARD:
        for path in candidates:
            if path > current:
                return path
        return candidates[0] if wrap else current

    for path in reversed(candidates):
        if path < current:
            return path
    return candidates[-1] if wrap else current


def nearest_focus(root: View, old: Path) -> Path | None:
    """
    First focusable leaf at or after *old*, else the last one before it.

    Used to repair focus after the focused view disappeared.
    """
    candidates = focusable_paths(root)
    for path in candidates:
        if path >= old:
            return path
    return candidates[-1] if candidates else None


def _unwrapped(view: View) -> Iterator[View]:
    yield view
    while isinstance(view, ViewWrapper):
        view = view.get_inner()
        yield view


def path_of(root: View, target: View) -> Path | None:
    """Path of *target* (compared by identity) below *root*."""
    if any(view is target for view in _unwrapped(root)):
        return ()
    for index, child in enumerate(root.children()):
        sub = path_of(child, target)
        if sub is not None:
            return (index,) + sub
    return None


def find_path(root: View, selector: Selector) -> Path | None:
    """
    Path of the first view matching *selector*, depth first.

    Wrappers share the path of the view they wrap, so a named wrapper
    around a leaf yields the leaf's path.
    """
    if any(selector.matches(view) for view in _unwrapped(root)):
        return ()
    for index, child in enumerate(root.children()):
        sub = find_path(child, selector)
        if sub is not None:
            return (index,) + sub
    return None
