from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import pandas as pd

from ..errors import MalformedInputRecord
from ..resources import CommDemand, ServiceModule
from ..topology import Topology
from .generate_demands import generate_chain_demands

logger = logging.getLogger(__name__)

NODES_FILE = "bs_nodes.csv"
LINKS_FILE = "links.csv"
SERVICES_FILE = "services.csv"
DEMANDS_FILE = "demands.csv"

NODE_COLUMNS = ["node_id", "storage", "compute", "uplink", "downlink"]
LINK_COLUMNS = ["link_id", "src", "dst", "capacity", "latency"]
SERVICE_COLUMNS = ["service_id", "cpu_capacity_ghz", "memory_capacity_gb",
                   "execution_cost", "vm_fixed_latency_ms"]
DEMAND_COLUMNS = ["service_a", "service_b", "bandwidth"]


@dataclass
class Dataset:
    topology: Topology
    services: List[ServiceModule]
    demands: List[CommDemand]
    skipped: int = 0
    skipped_by_file: dict = field(default_factory=dict)


def read_table(path, required: List[str]) -> pd.DataFrame:
    """
    Read a tab- or comma-separated file. Header names are normalised
    (BOM, quotes, surrounding spaces, case) before checking `required`.
    """
    with open(path, encoding="utf-8-sig") as fh:
        header = fh.readline()
    sep = "\t" if "\t" in header else ","

    df = pd.read_csv(path, sep=sep, dtype=str, encoding="utf-8-sig", skip_blank_lines=True)
    df.columns = [str(c).replace("\ufeff", "").replace('"', "").strip().lower() for c in df.columns]

    missing = [c for c in required if c not in df.columns]
    if missing:
        raise KeyError(f"Missing columns in {os.path.basename(path)}: {missing}. Available: {list(df.columns)}")
    df = df[required].apply(lambda col: col.str.strip())
    return df.dropna(how="all")


def _numeric(df: pd.DataFrame, columns: List[str]) -> Tuple[pd.DataFrame, int]:
    """Coerce `columns` to float; rows that fail or have empty identity are dropped and counted."""
    out = df.copy()
    for c in columns:
        out[c] = pd.to_numeric(out[c], errors="coerce")
    bad = out[columns].isna().any(axis=1) | out.iloc[:, 0].isna() | (out.iloc[:, 0] == "")
    return out[~bad], int(bad.sum())


def load_node_records(path) -> Tuple[List[tuple], int]:
    df, skipped = _numeric(read_table(path, NODE_COLUMNS), NODE_COLUMNS[1:])
    return list(df.itertuples(index=False, name=None)), skipped


def load_link_records(path) -> Tuple[List[tuple], int]:
    df, skipped = _numeric(read_table(path, LINK_COLUMNS), LINK_COLUMNS[3:])
    return list(df.itertuples(index=False, name=None)), skipped


def load_services(path) -> Tuple[List[ServiceModule], int]:
    df, skipped = _numeric(read_table(path, SERVICE_COLUMNS), SERVICE_COLUMNS[1:])
    services, seen = [], set()
    for sid, cpu, mem, cost, latency in df.itertuples(index=False, name=None):
        if sid in seen:
            logger.warning("[DATA] Duplicate service %r skipped", sid)
            skipped += 1
            continue
        try:
            services.append(ServiceModule(sid, storage=mem, compute=cpu, cost=cost, latency=latency))
        except MalformedInputRecord as e:
            logger.warning("[DATA] %s", e)
            skipped += 1
            continue
        seen.add(sid)
    return services, skipped


def load_demands(path, services) -> Tuple[List[CommDemand], int]:
    known = {s.name for s in services}
    df, skipped = _numeric(read_table(path, DEMAND_COLUMNS), ["bandwidth"])
    demands = []
    for a, b, bw in df.itertuples(index=False, name=None):
        if a not in known or b not in known:
            logger.warning("[DATA] Demand %s->%s references unknown service", a, b)
            skipped += 1
            continue
        try:
            demands.append(CommDemand(a, b, bw))
        except MalformedInputRecord as e:
            logger.warning("[DATA] %s", e)
            skipped += 1
    return demands, skipped


def load_dataset(dataset_dir, seed: Optional[int] = 42) -> Dataset:
    """
    Load nodes, links, services and (optionally) demands from `dataset_dir`.
    Without a demands file, chain demands between consecutive services are generated.
    """
    skipped_by_file = {}

    node_records, skipped_by_file[NODES_FILE] = load_node_records(os.path.join(dataset_dir, NODES_FILE))
    link_records, skipped_by_file[LINKS_FILE] = load_link_records(os.path.join(dataset_dir, LINKS_FILE))
    topology, unresolved = Topology.from_records(node_records, link_records)
    skipped_by_file["topology"] = unresolved

    services, skipped_by_file[SERVICES_FILE] = load_services(os.path.join(dataset_dir, SERVICES_FILE))

    demands_path = os.path.join(dataset_dir, DEMANDS_FILE)
    if os.path.exists(demands_path):
        demands, skipped_by_file[DEMANDS_FILE] = load_demands(demands_path, services)
    else:
        demands = generate_chain_demands(services, seed=seed)
        logger.info("[DATA] No %s found, generated %d chain demands", DEMANDS_FILE, len(demands))

    skipped = sum(skipped_by_file.values())
    logger.info("[DATA] Loaded %d nodes, %d links, %d services, %d demands (%d records skipped)",
                len(topology.nodes), len(topology.links), len(services), len(demands), skipped)
    return Dataset(topology, services, demands, skipped, skipped_by_file)
