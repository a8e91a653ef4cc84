import numpy as np
import pytest

from jsprr import (CommDemand, EmptyInstanceError, JSPRRConfig, RelaxationInfeasible,
                   ServiceModule, Topology, solve_jsprr)

from .conftest import make_topology


def test_end_to_end(two_node_topology, three_services):
    demands = [CommDemand("s0", "s1", 5.0), CommDemand("s1", "s2", 5.0)]
    solution = solve_jsprr(two_node_topology, three_services, demands, JSPRRConfig(seed=5))

    assert solution.fractional.shape == (3, 2)
    np.testing.assert_allclose(solution.fractional.sum(axis=1), 1.0, atol=1e-6)
    assert solution.node_names == ["A", "B"]
    assert set(solution.fractional_row("s0")) == {"A", "B"}

    placement = solution.placement
    assert sorted(placement.placed.values()) == ["A", "A", "B"]
    # every demand is either co-located or crosses the single 20-unit link
    assert placement.unrouted == []
    assert two_node_topology.links[0].used <= 20


def test_same_config_is_reproducible(diamond_topology):
    services = [ServiceModule(f"s{i}", storage=30, compute=10, cost=float(i)) for i in range(12)]
    demands = [CommDemand(f"s{i}", f"s{i + 1}", 12.0) for i in range(11)]
    first = solve_jsprr(diamond_topology, services, demands, JSPRRConfig(seed=123))
    second = solve_jsprr(diamond_topology, services, demands, JSPRRConfig(seed=123))
    assert dict(first.placement.assignments) == dict(second.placement.assignments)
    assert dict(first.placement.routes) == dict(second.placement.routes)
    assert first.placement.unrouted == second.placement.unrouted


def test_pulp_backend(two_node_topology, three_services):
    solution = solve_jsprr(two_node_topology, three_services, (), JSPRRConfig(backend="pulp"))
    assert solution.backend == "pulp"
    assert len(solution.placement.placed) == 3


def test_infeasible_relaxation_touches_nothing(two_node_topology):
    services = [ServiceModule(f"s{i}", storage=60, compute=1) for i in range(3)]
    with pytest.raises(RelaxationInfeasible):
        solve_jsprr(two_node_topology, services)
    assert all(tuple(n.usage) == (0, 0, 0, 0) for n in two_node_topology.nodes.values())


def test_empty_inputs(two_node_topology):
    with pytest.raises(EmptyInstanceError):
        solve_jsprr(two_node_topology, [])
    with pytest.raises(EmptyInstanceError):
        solve_jsprr(Topology(), [ServiceModule("s", 1, 1)])


def test_reset_between_runs():
    topo = make_topology([("A", 10, 10)], [])
    services = [ServiceModule("s", storage=10, compute=10)]
    for _ in range(2):
        solution = solve_jsprr(topo, services)
        assert solution.placement.node_of("s") == "A"


def test_config_validation():
    with pytest.raises(ValueError):
        JSPRRConfig(backend="cplex")
    with pytest.raises(ValueError):
        JSPRRConfig(path_weight="bandwidth")
    with pytest.raises(ValueError):
        JSPRRConfig(eps=-1)


def test_rerun_without_reset_keeps_one_host_per_service(two_node_topology, three_services):
    for seed in (11, 12):
        solve_jsprr(two_node_topology, three_services, (), JSPRRConfig(seed=seed, reset_usage=False))

    by_name = {s.name: s for s in three_services}
    hosts = [n for s in three_services for n in two_node_topology.nodes.values() if s.name in n.hosted]
    assert len(hosts) == len(three_services)
    for node in two_node_topology.nodes.values():
        hosted = [by_name[name] for name in node.hosted]
        assert node.usage.storage == pytest.approx(sum(s.storage for s in hosted))
        assert node.usage.compute == pytest.approx(sum(s.compute for s in hosted))
