import pytest

from jsprr import Link, ResourceNode, ServiceModule, Topology


def make_topology(node_specs, link_specs):
    topo = Topology()
    for spec in node_specs:
        topo.add_node(ResourceNode(*spec))
    for spec in link_specs:
        topo.add_link(Link(*spec))
    return topo


@pytest.fixture
def two_node_topology():
    # A: storage 100 / compute 10, B: storage 50 / compute 5, one link of 20
    return make_topology(
        [("A", 100, 10, 100, 100), ("B", 50, 5, 100, 100)],
        [("AB", "A", "B", 20, 1.0)],
    )


@pytest.fixture
def three_services():
    return [ServiceModule(f"s{i}", storage=40, compute=3, cost=1.0) for i in range(3)]


@pytest.fixture
def diamond_topology():
    #      B
    #    /   \
    #   A     D --- E      F (isolated)
    #    \   /
    #      C
    return make_topology(
        [(n, 100, 100, 100, 100) for n in "ABCDEF"],
        [
            ("ab", "A", "B", 50, 1.0),
            ("bd", "B", "D", 50, 1.0),
            ("ac", "A", "C", 50, 1.0),
            ("cd", "C", "D", 50, 1.0),
            ("de", "D", "E", 50, 5.0),
        ],
    )
