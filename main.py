#!/usr/bin/env python3
"""
Car Explorer - Command-line entry point

Loads the car CSV, optionally selects one model by name, and writes the
scatter chart (and the starplot of the selection) to standalone HTML files.
For the interactive page, run panel_app.py instead.

Usage:
    python main.py                                # Export cars.csv -> chart.html
    python main.py --csv data/cars.csv --out out/chart.html
    python main.py --select "Honda Civic DX 2dr"  # Also export the starplot
    python main.py --summary                      # Print dataset summary only
"""

import sys
import argparse


def print_summary(explorer):
    """Print a short description of the loaded dataset."""
    state = explorer.get_current_state()
    print("=" * 60)
    print("  Car Explorer")
    print("=" * 60)
    print(f"  Source:     {explorer.dataset.source}")
    print(f"  Records:    {state['num_records']}")
    print(f"  Categories: {', '.join(state['categories'])}")
    if state["selection"]:
        print(f"  Selected:   {state['selection']}")
    print("=" * 60)


def main(argv=None):
    """Load the dataset and export figures. Returns the process exit code."""
    parser = argparse.ArgumentParser(description="Car Explorer")
    parser.add_argument(
        "--csv",
        default=None,
        help="CSV file to load (default: csv_file from config.json or cars.csv)",
    )
    parser.add_argument(
        "--select", "-s",
        default=None,
        help="Select the first record with this name",
    )
    parser.add_argument(
        "--out", "-o",
        default="chart.html",
        help="Output HTML file for the scatter chart",
    )
    parser.add_argument(
        "--starplot-out",
        default="starplot.html",
        help="Output HTML file for the starplot (only with --select)",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print the dataset summary and exit without exporting",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show debug output",
    )
    args = parser.parse_args(argv)

    import config
    from explorer.core import CarExplorer, ExplorerConfig
    from explorer.logging import setup_logging

    setup_logging(verbose=args.verbose)
    explorer = CarExplorer(ExplorerConfig.from_config(csv_file=args.csv))

    if not explorer.load():
        # The console handler already shows the ERROR record unless it is off
        if config.get("console_format", "simple") == "clean":
            print(f"Error: {explorer.load_error}")
        return 1

    if args.select:
        record = explorer.find_record(args.select)
        if record is None:
            print(f"No record named '{args.select}'")
            return 2
        explorer.dispatch("click", record.index)

    print_summary(explorer)
    if args.summary:
        return 0

    # The exported page plays the entrance itself
    result = explorer.export(args.out)
    if result["status"] != "success":
        print(f"Error: {result['message']}")
        return 1
    print(f"Chart written to {result['filepath']} ({result['size_bytes']:,} bytes)")

    if args.select:
        result = explorer.export(args.starplot_out, which="starplot")
        if result["status"] != "success":
            print(f"Error: {result['message']}")
            return 1
        print(f"Starplot written to {result['filepath']}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
