#!/usr/bin/env python3
"""
healthcheck.py
- Basic healthcheck script for Docker HEALTHCHECK / exec probes.
- Returns exit code 0 if the liveness endpoint answers, 1 if not.
- The listener address comes from the first argument, then the
  METRICS_LISTEN_ADDRESS env var, then :9001. Pass the same value as
  --metrics-listen-address when the shifter was started with that flag.
- Usage:
    python -m node_pool_shifter.utils.healthcheck [host:port]
"""

import os
import sys

import requests


def main(argv=None):
    argv = sys.argv[1:] if argv is None else list(argv)
    address = argv[0] if argv else os.getenv("METRICS_LISTEN_ADDRESS", ":9001")
    host, _, port = address.rpartition(":")
    url = f"http://{host or '127.0.0.1'}:{port}/liveness"

    try:
        response = requests.get(url, timeout=2)
    except requests.RequestException as e:
        print(f"❌ Healthcheck failed: {url} unreachable ({e})")
        return 1

    if response.status_code != 200:
        print(f"❌ Healthcheck failed: {url} returned {response.status_code}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
