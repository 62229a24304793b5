#!/usr/bin/env python3
"""
Fetch current gas prices near a coordinate pair and print them as CSV.

The output is the data file shown by the web view; refresh it periodically:
  python scripts/fetch_gas_prices.py --latitude 37.7749 --longitude -122.4194 > data/current.csv.tmp \
      && mv data/current.csv.tmp data/current.csv

Exits non-zero (nothing on stdout) if the lookup fails.
"""
import os
import sys

# Add the project root to the path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from gastrak.collector import main

if __name__ == "__main__":
    main()
