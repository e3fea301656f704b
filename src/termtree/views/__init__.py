"""Minimal views shipped with the core."""
from __future__ import annotations

from termtree.views.dummy import DummyView
from termtree.views.linear import LinearLayout
from termtree.views.text import TextView

__all__ = ["DummyView", "LinearLayout", "TextView"]
