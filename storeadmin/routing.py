"""
Declarative page routing with capability-gated subtrees.

A route table is a tree of ``RouteNode``. Resolving a path walks the tree
depth first and returns the first node whose pattern matches, together with
the layout shells and capability tags collected on the way down. A single
guard then decides whether the request may see the view.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

AUTHENTICATED = "authenticated"

# capability tag -> predicate over the current user (None when anonymous)
CAPABILITIES: Dict[str, Callable[[Any], bool]] = {
    AUTHENTICATED: lambda user: user is not None,
}


@dataclass
class RouteNode:
    path: str
    view: Optional[str] = None
    shell: Optional[str] = None
    requires: Optional[str] = None
    children: List["RouteNode"] = field(default_factory=list)


@dataclass
class RouteMatch:
    node: RouteNode
    params: Dict[str, str]
    shells: List[str]
    requires: List[str]

    @property
    def view(self) -> str:
        return self.node.view


def _segments(path: str) -> Tuple[str, ...]:
    return tuple(s for s in path.split("/") if s)


def match_pattern(pattern: str, path: str) -> Optional[Dict[str, str]]:
    # "/dashboard/products/details/:id" -> {"id": ...}, None on mismatch
    want, got = _segments(pattern), _segments(path)
    if len(want) != len(got):
        return None
    params = {}
    for w, g in zip(want, got):
        if w.startswith(":"):
            params[w[1:]] = g
        elif w != g:
            return None
    return params


class RouteTable:
    def __init__(self, routes: Sequence[RouteNode], login_path: str = "/"):
        self.routes = list(routes)
        self.login_path = login_path
        for node in self._walk(self.routes):
            if node.requires is not None and node.requires not in CAPABILITIES:
                raise ValueError(f"unknown capability {node.requires!r} on route {node.path}")

    def _walk(self, nodes):
        for node in nodes:
            yield node
            yield from self._walk(node.children)

    def resolve(self, path: str) -> Optional[RouteMatch]:
        return self._resolve(self.routes, path, [], [])

    def _resolve(self, nodes, path, shells, requires) -> Optional[RouteMatch]:
        for node in nodes:
            node_shells = shells + [node.shell] if node.shell else shells
            node_requires = requires + [node.requires] if node.requires else requires
            # children first so an index child wins over its layout parent
            found = self._resolve(node.children, path, node_shells, node_requires)
            if found is not None:
                return found
            if node.view is None:
                continue
            params = match_pattern(node.path, path)
            if params is not None:
                return RouteMatch(node=node, params=params, shells=shells, requires=node_requires)
        return None

    def authorize(self, match: RouteMatch, user: Any) -> Optional[str]:
        # None lets the view render, otherwise the path to redirect to
        for tag in match.requires:
            if not CAPABILITIES[tag](user):
                return self.login_path
        return None

    def paths(self) -> List[Tuple[str, str, bool]]:
        # (pattern, view, gated) for every routable node, in table order
        out = []

        def collect(nodes, gated):
            for node in nodes:
                node_gated = gated or node.requires is not None
                if node.view is not None:
                    out.append((node.path, node.view, node_gated))
                collect(node.children, node_gated)

        collect(self.routes, False)
        return out
