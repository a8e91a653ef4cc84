from .dataset import Dataset, load_dataset, load_demands, load_services, read_table
from .generate_demands import generate_chain_demands
from .metrics import (compute_system_metrics,
                      link_usage_frame,
                      node_usage_frame,
                      placement_frame,
                      placement_summary)
