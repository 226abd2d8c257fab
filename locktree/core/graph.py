import logging
from typing import Dict, Iterable, List, Tuple

from locktree.core.exceptions import AmbiguousDependency, UnresolvedDependency
from locktree.core.model import Package, PackageRecord

NodeId = int


class DependencyGraph:
    """
    Directed graph of locked packages.

    Nodes live in an arena and are addressed by their NodeId (the position of
    the package in the input). Edges are kept per node in the order they were
    added. The graph is not modified once build_graph returns it.
    """

    def __init__(self) -> None:
        self.packages: List[Package] = []
        self.edges: List[List[NodeId]] = []
        self.index: Dict[Tuple[str, str], NodeId] = {}

    def __len__(self) -> int:
        return len(self.packages)

    def __getitem__(self, node_id: NodeId) -> Package:
        return self.packages[node_id]

    @property
    def edge_count(self) -> int:
        return sum(len(targets) for targets in self.edges)

    def node_ids(self) -> range:
        return range(len(self.packages))

    def find(self, name: str, version: str) -> NodeId:
        return self.index[(name, version)]

    def dependencies(self, node_id: NodeId) -> List[NodeId]:
        return self.edges[node_id]

    def add_node(self, package: Package) -> NodeId:
        if package.key in self.index:
            raise AmbiguousDependency(package.name, package.version)

        node_id = len(self.packages)
        self.packages.append(package)
        self.edges.append([])
        self.index[package.key] = node_id
        return node_id

    def add_edge(self, source: NodeId, target: NodeId) -> None:
        targets = self.edges[source]
        if target not in targets:
            targets.append(target)

    def roots(self) -> List[NodeId]:
        """Packages no other package depends on, in input order."""
        has_parent = set()
        for source in self.node_ids():
            for target in self.edges[source]:
                if target != source:
                    has_parent.add(target)

        return [node_id for node_id in self.node_ids() if node_id not in has_parent]


def build_graph(records: Iterable[PackageRecord]) -> DependencyGraph:
    records = list(records)
    graph = DependencyGraph()

    for record in records:
        graph.add_node(record.package)

    for node_id, record in enumerate(records):
        for dep in record.dependencies:
            target = graph.index.get(dep.key)
            if target is None:
                raise UnresolvedDependency(record.package, dep)
            graph.add_edge(node_id, target)

    logging.debug(f"Graph built. {len(graph)} packages, {graph.edge_count} edges.")
    return graph
