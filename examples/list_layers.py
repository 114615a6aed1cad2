#!/usr/bin/env python3
"""Example: open a GPS file through GPSBabel and print its layers."""

from __future__ import annotations

import sys

from gpsbabel_bridge import open_gpsbabel
from gpsbabel_bridge.errors import BridgeError


def main(argv: list[str]) -> int:
    if len(argv) != 2:
        print("usage: list_layers.py GPSBABEL:driver:path | path", file=sys.stderr)
        return 2

    try:
        datasource = open_gpsbabel(argv[1])
    except BridgeError as exc:
        print(f"FAIL: {exc}", file=sys.stderr)
        return exc.exit_code

    with datasource:
        for layer in datasource.layers:
            print(f"{layer.name}: {layer.feature_count()} features")
            for feature in list(layer)[:3]:
                name = feature.properties.get("name") or "<unnamed>"
                print(f"  #{feature.fid} {name} {feature.coordinates}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
