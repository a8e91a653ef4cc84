import argparse
import logging
import os
import sys

import numpy as np

from .config import JSPRRConfig
from .errors import JSPRRError
from .pipeline import solve_jsprr
from .utils import (compute_system_metrics, link_usage_frame, load_dataset,
                    node_usage_frame, placement_frame, placement_summary)

logger = logging.getLogger(__name__)


def print_report(solution, topology):
    np.set_printoptions(precision=3, suppress=True)
    print("LP fractional solution:")
    for name, row in zip(solution.service_names, solution.fractional):
        print(f"  {name}: {row}")

    print("\nFinal placement:")
    for service, node in solution.placement.assignments.items():
        print(f"  {service} -> {node if node is not None else 'NOT PLACED'}")

    print("\nLink usages:")
    for link in topology.links:
        print(f"  {link.link_id} ({link.node_a}-{link.node_b}): used {link.used:.2f} / cap {link.capacity:.2f}")

    for failure in solution.placement.routing_failures:
        d = failure.demand
        print(f"  [unrouted] demand {failure.index} {d.service_a}->{d.service_b}: {failure.reason}")

    print("\n=== Evaluation Metrics ===")
    summary = placement_summary(solution.placement)
    print(f"Services placed on Edge: {summary['edge']}")
    print(f"Services placed on Cloud: {summary['cloud']}")
    print(f"Services not placed: {summary['unplaced']}")

    print("\nLink utilization:")
    for row in link_usage_frame(topology).itertuples(index=False):
        print(f"  {row.link} ({row.a}-{row.b}): {row.util_pct:.1f}%")

    print("\nResource utilization per node:")
    nodes_df = node_usage_frame(topology)
    cols = ["node"] + [c for c in nodes_df.columns if c.endswith("_util_pct")]
    print(nodes_df[cols].round(1).to_string(index=False))

    print("\nSystem-level metrics:")
    for key, value in compute_system_metrics(topology, solution.placement).items():
        print(f"  {key}: {value:.2f}")


def write_csv(solution, topology, out_dir):
    os.makedirs(out_dir, exist_ok=True)
    placement_frame(solution.placement).to_csv(os.path.join(out_dir, "placement.csv"), index=False)
    node_usage_frame(topology).to_csv(os.path.join(out_dir, "node_usage.csv"), index=False)
    link_usage_frame(topology).to_csv(os.path.join(out_dir, "link_usage.csv"), index=False)
    print(f"[INFO] Results written to {out_dir}")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Joint service placement and request routing (LP + rounding).")
    parser.add_argument("--dataset", type=str, required=True, help="Folder with bs_nodes.csv, links.csv, services.csv")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--backend", choices=["highs", "pulp"], default="highs")
    parser.add_argument("--path-weight", choices=["latency", "hops"], default="latency")
    parser.add_argument("--eps", type=float, default=1e-6)
    parser.add_argument("--csv-out", type=str, default=None, help="Folder for placement/usage CSV exports")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format='%(asctime)s - %(levelname)s - %(message)s')

    config = JSPRRConfig(seed=args.seed, backend=args.backend, eps=args.eps, path_weight=args.path_weight)
    try:
        data = load_dataset(os.path.expanduser(args.dataset), seed=args.seed)
    except (OSError, KeyError, ValueError) as e:
        logger.error("[DATA] Could not load dataset from %s: %s", args.dataset, e)
        return 1
    if data.skipped:
        print(f"[WARN] {data.skipped} malformed record(s) skipped: {data.skipped_by_file}")

    try:
        solution = solve_jsprr(data.topology, data.services, data.demands, config,
                               skipped_records=data.skipped)
    except JSPRRError as e:
        logger.error("[JSPRR] %s: %s", type(e).__name__, e)
        return 1

    print_report(solution, data.topology)
    if args.csv_out:
        write_csv(solution, data.topology, args.csv_out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
