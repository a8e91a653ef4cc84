from typing import Dict

import pandas as pd

from ..resources import DIMENSIONS


def _pct(used, cap):
    return (used / cap) * 100.0 if cap > 0 else 0.0


def _is_cloud(node_name) -> bool:
    return "cloud" in str(node_name).lower()


def node_usage_frame(topology) -> pd.DataFrame:
    """One row per node: used / capacity / utilization % for every dimension."""
    rows = []
    for name, node in topology.nodes.items():
        row = {"node": name}
        for dim, used, cap in zip(DIMENSIONS, node.usage, node.capacity):
            row[f"{dim}_used"] = used
            row[f"{dim}_cap"] = cap
            row[f"{dim}_util_pct"] = _pct(used, cap)
        row["hosted"] = len(node.hosted)
        rows.append(row)
    return pd.DataFrame(rows)


def link_usage_frame(topology) -> pd.DataFrame:
    rows = [{
        "link": link.link_id,
        "a": link.node_a,
        "b": link.node_b,
        "used": link.used,
        "capacity": link.capacity,
        "latency": link.latency,
        "util_pct": _pct(link.used, link.capacity),
    } for link in topology.links]
    return pd.DataFrame(rows, columns=["link", "a", "b", "used", "capacity", "latency", "util_pct"])


def placement_frame(placement) -> pd.DataFrame:
    rows = [{"service": s, "node": n, "placed": n is not None}
            for s, n in placement.assignments.items()]
    return pd.DataFrame(rows, columns=["service", "node", "placed"])


def placement_summary(placement) -> Dict[str, int]:
    """Counts of services on edge nodes, cloud nodes (name contains 'cloud') and unplaced."""
    summary = {"edge": 0, "cloud": 0, "unplaced": 0}
    for node in placement.assignments.values():
        if node is None:
            summary["unplaced"] += 1
        elif _is_cloud(node):
            summary["cloud"] += 1
        else:
            summary["edge"] += 1
    return summary


def compute_system_metrics(topology, placement) -> Dict[str, float]:
    """
    Descriptive, report-only figures:
      avg_latency_ms        mean latency over all links
      edge_utilization_pct  mean compute utilization over non-cloud nodes
      cloud_load_pct        share of services placed on cloud nodes
      bw_efficiency_pct     total used / total link capacity
      ar_frame_rate_fps     min(60, 1000 / avg latency)
      scalability_pct       100 - (0.2 * edge util + 0.1 * bw efficiency)
    """
    links = topology.links
    avg_latency = sum(l.latency for l in links) / len(links) if links else 0.0

    edge_utils = [_pct(n.usage.compute, n.capacity.compute)
                  for name, n in topology.nodes.items() if not _is_cloud(name)]
    avg_edge_util = sum(edge_utils) / len(edge_utils) if edge_utils else 0.0

    summary = placement_summary(placement)
    total_services = sum(summary.values())
    cloud_load = _pct(summary["cloud"], total_services)

    total_cap = sum(l.capacity for l in links)
    total_used = sum(l.used for l in links)
    bw_efficiency = _pct(total_used, total_cap)

    ar_frame_rate = min(60.0, 1000.0 / avg_latency) if avg_latency > 0 else 0.0
    scalability = 100.0 - (avg_edge_util * 0.2 + bw_efficiency * 0.1)

    return {
        "avg_latency_ms": avg_latency,
        "edge_utilization_pct": avg_edge_util,
        "cloud_load_pct": cloud_load,
        "bw_efficiency_pct": bw_efficiency,
        "ar_frame_rate_fps": ar_frame_rate,
        "scalability_pct": scalability,
    }
