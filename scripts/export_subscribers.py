#!/usr/bin/env python3
"""
Export the subscriber file to CSV.

Usage:
    python scripts/export_subscribers.py [output.csv]

Reads SUBSCRIBERS_FILE (from .env.development or .env.production). Without
an output path the CSV goes to subscribers-<today>.csv.
"""

import sys
import os

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import date

from fincalc.services.subscribers import (
    SubscriberStoreError,
    export_csv,
    get_subscriber_store,
)


def export_subscribers(output_path: str) -> None:
    """Write every stored subscriber to output_path."""
    store = get_subscriber_store()

    try:
        subscribers = store.list()
    except SubscriberStoreError as e:
        print(f"Error: {e}")
        sys.exit(1)

    with open(output_path, "w", encoding="utf-8", newline="") as fh:
        fh.write(export_csv(subscribers))

    print(f"Exported {len(subscribers)} subscribers from {store.path} to {output_path}")


if __name__ == "__main__":
    default_name = f"subscribers-{date.today().isoformat()}.csv"
    export_subscribers(sys.argv[1] if len(sys.argv) > 1 else default_name)
