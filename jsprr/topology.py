# All comments in English

import logging
import math
import threading
from typing import Dict, List, Optional, Tuple

import networkx as nx

from .errors import MalformedInputRecord
from .resources import ResourceNode

logger = logging.getLogger(__name__)

PATH_WEIGHTS = ("latency", "hops")


class Link:
    """Undirected, bandwidth-bounded edge between two resource nodes."""

    def __init__(self, link_id, node_a, node_b, capacity, latency):
        self.link_id = str(link_id)
        self.node_a = str(node_a)
        self.node_b = str(node_b)
        self.capacity = float(capacity)
        self.latency = float(latency)
        if self.capacity < 0 or self.latency < 0:
            raise MalformedInputRecord(f"Link {self.link_id!r} has negative capacity or latency")
        self._used = 0.0
        self._lock = threading.Lock()

    @property
    def used(self) -> float:
        return self._used

    @property
    def residual(self) -> float:
        return max(0.0, self.capacity - self._used)

    @property
    def endpoints(self) -> Tuple[str, str]:
        return self.node_a, self.node_b

    def other(self, node: str) -> str:
        if node == self.node_a:
            return self.node_b
        if node == self.node_b:
            return self.node_a
        raise KeyError(f"{node!r} is not an endpoint of link {self.link_id!r}")

    def reserve(self, bandwidth: float) -> bool:
        with self._lock:
            if self._used + bandwidth > self.capacity:
                return False
            self._used += bandwidth
            return True

    def release(self, bandwidth: float) -> None:
        with self._lock:
            self._used = max(0.0, self._used - bandwidth)

    def reset(self) -> None:
        with self._lock:
            self._used = 0.0

    def __repr__(self):
        return (f"<Link {self.link_id} {self.node_a}-{self.node_b} "
                f"used={self._used:.2f}/{self.capacity:.2f} lat={self.latency}>")


class Topology:
    """
    Resource nodes connected by undirected links, backed by a networkx
    MultiGraph keyed by link id. Every resolvable link is kept (parallel
    links and self loops included); routing uses, per node pair, the
    lowest-latency link, ties broken by link id.

    Link endpoints resolve to node names case-insensitively.
    """

    def __init__(self, tie_tol=1e-9):
        self.G = nx.MultiGraph()
        self.tie_tol = tie_tol
        self._nodes: Dict[str, ResourceNode] = {}
        self._by_lower: Dict[str, str] = {}
        self._links: List[Link] = []
        self._link_ids = set()
        self._routing = None

    # ------------------------- construction -------------------------
    def add_node(self, node: ResourceNode) -> ResourceNode:
        key = node.name.lower()
        if key in self._by_lower:
            raise MalformedInputRecord(f"Duplicate node {node.name!r} (already have {self._by_lower[key]!r})")
        self._nodes[node.name] = node
        self._by_lower[key] = node.name
        self.G.add_node(node.name)
        self._routing = None
        return node

    def resolve(self, name) -> Optional[str]:
        """Canonical node name for `name`, matched exactly first, then ignoring case."""
        name = str(name)
        if name in self._nodes:
            return name
        return self._by_lower.get(name.lower())

    def add_link(self, link: Link) -> Link:
        a, b = self.resolve(link.node_a), self.resolve(link.node_b)
        missing = [raw for raw, found in zip(link.endpoints, (a, b)) if found is None]
        if missing:
            raise MalformedInputRecord(f"Link {link.link_id!r} has unknown endpoint(s) {missing}")
        if link.link_id in self._link_ids:
            raise MalformedInputRecord(f"Duplicate link id {link.link_id!r}")
        link.node_a, link.node_b = a, b
        self._links.append(link)
        self._link_ids.add(link.link_id)
        self.G.add_edge(a, b, key=link.link_id, link=link, latency=link.latency)
        self._routing = None
        return link

    @classmethod
    def from_records(cls, node_records, link_records):
        """
        Build a topology from (name, storage, compute, uplink, downlink) and
        (link_id, a, b, capacity, latency) tuples. Malformed records are
        skipped; returns (topology, number_of_skipped_records).
        """
        topo = cls()
        skipped = 0
        for rec in node_records:
            try:
                topo.add_node(ResourceNode(*rec))
            except (MalformedInputRecord, TypeError, ValueError) as e:
                logger.warning("[DATA] Skipping node record %r: %s", rec, e)
                skipped += 1
        for rec in link_records:
            try:
                topo.add_link(Link(*rec))
            except (MalformedInputRecord, TypeError, ValueError) as e:
                logger.warning("[DATA] Skipping link record %r: %s", rec, e)
                skipped += 1
        logger.info("[DATA] Topology with %d nodes and %d links (%d records skipped)",
                    len(topo._nodes), len(topo._links), skipped)
        return topo, skipped

    # ------------------------- lookups -------------------------
    @property
    def nodes(self) -> Dict[str, ResourceNode]:
        return dict(self._nodes)

    @property
    def links(self) -> List[Link]:
        return list(self._links)

    def node(self, name: str) -> ResourceNode:
        return self._nodes[name]

    def _routing_graph(self) -> nx.Graph:
        """Simple graph holding the preferred link of every connected node pair."""
        if self._routing is None:
            R = nx.Graph()
            R.add_nodes_from(self._nodes)
            for link in self._links:
                a, b = link.endpoints
                if a == b:
                    continue
                if R.has_edge(a, b):
                    best = R[a][b]["link"]
                    if (best.latency, best.link_id) <= (link.latency, link.link_id):
                        continue
                R.add_edge(a, b, link=link, latency=link.latency)
            self._routing = R
        return self._routing

    def neighbors(self, name: str) -> List[str]:
        return sorted(self._routing_graph().neighbors(name))

    def link_between(self, a: str, b: str) -> Optional[Link]:
        R = self._routing_graph()
        if R.has_edge(a, b):
            return R[a][b]["link"]
        return None

    # ------------------------- path discovery -------------------------
    def find_path(self, a: str, b: str, weight: str = "latency") -> Optional[List[Link]]:
        """
        Minimum-latency (or minimum-hop) path from a to b as a list of links.
        Paths whose latency sums agree within `tie_tol` count as equal; among
        equal paths the lexicographically smallest sequence of node names
        wins. Returns [] when a == b and None when b is unreachable.
        """
        if weight not in PATH_WEIGHTS:
            raise ValueError(f"Unknown path weight {weight!r}, expected one of {PATH_WEIGHTS}")
        if a not in self._nodes or b not in self._nodes:
            raise KeyError(f"Unknown node in path query {a!r} -> {b!r}")
        if a == b:
            return []
        R = self._routing_graph()
        if not nx.has_path(R, a, b):
            return None

        if weight == "hops":
            path = min(nx.all_shortest_paths(R, a, b), key=tuple)
        else:
            best_cost, path = None, None
            # candidates come in non-decreasing latency order
            for candidate in nx.shortest_simple_paths(R, a, b, weight="latency"):
                cost = sum(R[u][v]["latency"] for u, v in zip(candidate[:-1], candidate[1:]))
                if best_cost is None:
                    best_cost, path = cost, candidate
                elif math.isclose(cost, best_cost, rel_tol=self.tie_tol, abs_tol=self.tie_tol):
                    path = min(path, candidate, key=tuple)
                else:
                    break
        return [R[u][v]["link"] for u, v in zip(path[:-1], path[1:])]

    def reset_usage(self) -> None:
        for node in self._nodes.values():
            node.reset()
        for link in self._links:
            link.reset()

    def __repr__(self):
        return f"<Topology | nodes={len(self._nodes)} links={len(self._links)}>"
