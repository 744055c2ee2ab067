"""
NetworkX class hierarchy built from superclass references.

Edges point from subclass to superclass. Superclasses that were not
extracted themselves (declared in another framework) become leaf nodes
marked external.
"""

import logging
from typing import Iterable

import networkx as nx

from .models import InterfaceDecl

log = logging.getLogger(__name__)


def build_hierarchy(edges: Iterable[tuple[str, str | None]]) -> nx.DiGraph:
    """Build the hierarchy from (class, superclass-or-None) pairs."""
    g: nx.DiGraph = nx.DiGraph()
    pairs = list(edges)

    for name, _ in pairs:
        g.add_node(name, external=False)

    for name, sup in pairs:
        if sup is None:
            continue
        if sup not in g:
            g.add_node(sup, external=True)
        g.add_edge(name, sup)

    log.info("Hierarchy: %d classes, %d superclass edges", g.number_of_nodes(), g.number_of_edges())
    return g


def hierarchy_from_interfaces(interfaces: Iterable[InterfaceDecl]) -> nx.DiGraph:
    return build_hierarchy(
        (decl.name, decl.superclass.name if decl.superclass else None)
        for decl in interfaces
    )


def superclass_chain(g: nx.DiGraph, name: str) -> list[str]:
    """Superclasses of name, nearest first. Stops at a root, an external class, or a cycle."""
    chain: list[str] = []
    seen = {name}
    current = name
    while current in g:
        parents = list(g.successors(current))
        if not parents:
            break
        parent = parents[0]
        if parent in seen:
            log.warning("Superclass cycle at %s", parent)
            break
        chain.append(parent)
        seen.add(parent)
        current = parent
    return chain


def subclasses(g: nx.DiGraph, name: str, recursive: bool = False) -> list[str]:
    if name not in g:
        return []
    if recursive:
        return sorted(nx.ancestors(g, name))
    return sorted(g.predecessors(name))


def root_classes(g: nx.DiGraph) -> list[str]:
    """Classes with no superclass, external ones included."""
    return sorted(n for n in g.nodes() if g.out_degree(n) == 0)


def hierarchy_stats(g: nx.DiGraph) -> dict:
    external = [n for n, data in g.nodes(data=True) if data.get("external")]
    depth = 0
    for node in g.nodes():
        depth = max(depth, len(superclass_chain(g, node)))
    return {
        "classes": g.number_of_nodes() - len(external),
        "external": len(external),
        "roots": len(root_classes(g)),
        "max_depth": depth,
    }
