import pytest

from jsprr import Link, MalformedInputRecord, ResourceNode, Topology

from .conftest import make_topology


def _ids(path):
    return [link.link_id for link in path]


def test_equal_cost_paths_pick_smallest_node_sequence(diamond_topology):
    assert _ids(diamond_topology.find_path("A", "D")) == ["ab", "bd"]
    assert _ids(diamond_topology.find_path("D", "A")) == ["bd", "ab"]
    assert _ids(diamond_topology.find_path("A", "D", weight="hops")) == ["ab", "bd"]


def test_path_to_farther_node(diamond_topology):
    assert _ids(diamond_topology.find_path("A", "E")) == ["ab", "bd", "de"]


def test_same_node_is_empty_path(diamond_topology):
    assert diamond_topology.find_path("C", "C") == []


def test_disconnected_nodes_report_no_path(diamond_topology):
    assert diamond_topology.find_path("A", "F") is None


def test_unknown_node_or_weight():
    topo = make_topology([("A", 1, 1)], [])
    with pytest.raises(KeyError):
        topo.find_path("A", "Z")
    with pytest.raises(ValueError):
        topo.find_path("A", "A", weight="bandwidth")


def test_latency_and_hop_metrics_differ():
    topo = make_topology(
        [("X", 1, 1), ("Y", 1, 1), ("Z", 1, 1)],
        [("xy", "X", "Y", 10, 10.0), ("xz", "X", "Z", 10, 1.0), ("zy", "Z", "Y", 10, 1.0)],
    )
    assert _ids(topo.find_path("X", "Y", weight="latency")) == ["xz", "zy"]
    assert _ids(topo.find_path("X", "Y", weight="hops")) == ["xy"]


def test_invalid_links_are_rejected():
    topo = make_topology([("A", 1, 1), ("B", 1, 1)], [("ab", "A", "B", 10, 1.0)])
    with pytest.raises(MalformedInputRecord):
        topo.add_link(Link("ac", "A", "C", 10, 1.0))
    with pytest.raises(MalformedInputRecord):
        topo.add_link(Link("ab", "B", "A", 99, 1.0))
    with pytest.raises(MalformedInputRecord):
        topo.add_node(ResourceNode("A", 1, 1))
    with pytest.raises(MalformedInputRecord):
        topo.add_node(ResourceNode("b", 1, 1))
    assert len(topo.links) == 1


def test_parallel_links_and_self_loops_are_kept():
    topo, skipped = Topology.from_records(
        [("A", 10, 10), ("B", 10, 10)],
        [("l2", "A", "B", 50, 1.0), ("l1", "A", "B", 10, 1.0), ("slow", "A", "B", 99, 3.0),
         ("loop", "A", "A", 5, 0.0)],
    )
    assert skipped == 0
    assert _ids(topo.links) == ["l2", "l1", "slow", "loop"]
    assert topo.G.number_of_edges() == 4
    # same latency: smallest link id wins
    assert _ids(topo.find_path("A", "B")) == ["l1"]
    assert topo.link_between("B", "A").link_id == "l1"
    assert topo.neighbors("A") == ["B"]
    assert topo.find_path("A", "A") == []


def test_link_endpoints_resolve_ignoring_case():
    topo, skipped = Topology.from_records(
        [("BS1", 10, 10), ("BS2", 10, 10)],
        [("l1", "bs1", "bs2", 10, 1.0)],
    )
    assert skipped == 0
    link = topo.links[0]
    assert link.endpoints == ("BS1", "BS2")
    assert _ids(topo.find_path("BS1", "BS2")) == ["l1"]
    assert topo.resolve("bS2") == "BS2"
    assert topo.resolve("BS3") is None


def test_float_equal_latencies_still_tie():
    topo = make_topology(
        [(n, 1, 1) for n in "ABCD"],
        [("ab", "A", "B", 10, 0.1), ("bd", "B", "D", 10, 0.2),
         ("ac", "A", "C", 10, 0.3), ("cd", "C", "D", 10, 0.0)],
    )
    assert 0.1 + 0.2 != 0.3 + 0.0
    assert _ids(topo.find_path("A", "D")) == ["ab", "bd"]
    assert _ids(topo.find_path("D", "A")) == ["bd", "ab"]


def test_from_records_skips_and_counts_malformed():
    topo, skipped = Topology.from_records(
        [("A", 10, 10, 10, 10), ("B", 10, 10, 10, 10), ("A", 1, 1, 1, 1), ("C", -1, 1, 1, 1)],
        [("ab", "A", "B", 5, 1.0), ("bx", "B", "X", 5, 1.0), ("bad", "A", "B", "nan?", 1.0)],
    )
    assert sorted(topo.nodes) == ["A", "B"]
    assert _ids(topo.links) == ["ab"]
    assert skipped == 4


def test_neighbors_and_link_lookup(diamond_topology):
    assert diamond_topology.neighbors("D") == ["B", "C", "E"]
    assert diamond_topology.link_between("D", "B").link_id == "bd"
    assert diamond_topology.link_between("A", "E") is None


def test_link_reserve_and_release():
    link = Link("l", "A", "B", capacity=20, latency=1.0)
    assert link.reserve(15)
    assert not link.reserve(6)
    assert link.used == 15
    assert not link.reserve(5 + 5e-10)
    assert link.reserve(5)
    assert link.used == 20
    link.release(30)
    assert link.used == 0
    assert link.other("A") == "B"


def test_reset_usage(two_node_topology):
    two_node_topology.link_between("A", "B").reserve(5)
    two_node_topology.node("A").reserve(two_node_topology.node("A").capacity)
    two_node_topology.reset_usage()
    assert two_node_topology.links[0].used == 0
    assert tuple(two_node_topology.node("A").usage) == (0, 0, 0, 0)
