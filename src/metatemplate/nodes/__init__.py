"""Node-access adapters: the same capability in-process and over a browser."""

from metatemplate.nodes.base import MutationScope, NodeAccess
from metatemplate.nodes.browser import BrowserNode
from metatemplate.nodes.soup import SoupNode

__all__ = [
    "BrowserNode",
    "MutationScope",
    "NodeAccess",
    "SoupNode",
]
