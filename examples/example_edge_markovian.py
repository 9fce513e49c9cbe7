#!/usr/bin/env python3
"""
Edge-Markovian Comparison Example

This example demonstrates the calibration workflow of the edgeMarkov
library. It shows how to:

1. Load a contact trace from a ``n1 n2 start end`` file
2. Inspect its temporal metrics
3. Fit an Edge-Markovian model and simulate a trace of the same length
4. Compare the two traces and export the simulation

Run it with the path of a contact file, or without arguments to use a
synthetic trace.
"""

import sys
from pathlib import Path

from edgeMarkov import (
    build_from_contact_intervals,
    compare,
    export_temporal_graph,
    get_temporal_graph_info,
    setup_logging,
)
from edgeMarkov.models import generate_edge_markovian_graph
from edgeMarkov.timeseries import histogram_to_dataframe, truncate_histogram


def main():
    """Main function demonstrating the comparison workflow."""

    setup_logging(level="WARNING")

    print("=" * 60)
    print("Edge-Markovian Comparison Example")
    print("=" * 60)

    # Step 1: Load the trace
    print("\n1. Loading Contact Trace")
    print("-" * 40)

    if len(sys.argv) > 1:
        observed = build_from_contact_intervals(sys.argv[1])
        print(f"Loaded contacts from {sys.argv[1]}")
    else:
        observed = generate_edge_markovian_graph(100, p=0.002, q=0.15, duration=500, rng=7)
        print("No file given, using a synthetic trace")

    info = get_temporal_graph_info(observed)
    print(f"Nodes: {info['num_nodes']}, steps: {info['duration']}, "
          f"contacts: {info['num_contacts']}, mean density: {info['mean_density']:.4f}")

    # Step 2: Compare with a calibrated simulation
    print("\n2. Fitting and Simulating")
    print("-" * 40)

    report = compare(observed, rng=42)
    print(f"Estimated p = {report.parameters.p:.5f}, q = {report.parameters.q:.5f}")
    print(report.summary(["mean", "std", "trend"]))

    # Step 3: Inter-contact times
    print("\n3. Inter-Contact Times")
    print("-" * 40)

    for trace, metrics in (("observed", report.observed_metrics),
                           ("simulated", report.simulated_metrics)):
        histogram = truncate_histogram(metrics.inter_contact_histogram)
        print(f"{trace}: {sum(histogram.values())} gaps")
        print(histogram_to_dataframe(histogram).head(10))

    # Step 4: Export the simulated trace
    print("\n4. Exporting")
    print("-" * 40)

    output = Path("output") / "simulated_contacts.txt"
    export_temporal_graph(report.simulated, output, overwrite=True)
    print(f"Simulated trace written to {output}")


if __name__ == "__main__":
    main()
