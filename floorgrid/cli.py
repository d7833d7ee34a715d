"""
floorgrid CLI.

Usage:
    python -m floorgrid.cli new <title> --width W --height H --resolution R [--origin X Z]
    python -m floorgrid.cli list
    python -m floorgrid.cli contours <map_id> [--epsilon E] [--iterations K] [--world] [--out FILE]
    python -m floorgrid.cli distance <map_id>
    python -m floorgrid.cli beacon <map_id> <x> <z> <name>
    python -m floorgrid.cli doorway <map_id> <ax> <az> <bx> <bz> [--width W]
    python -m floorgrid.cli delete <map_id>

The map store lives in FLOORGRID_MAPS_DIR (default: resources/maps).
"""

import argparse
import json
import math
import os
import sys

import numpy as np

from floorgrid.contours import (
    DEFAULT_EPSILON,
    DEFAULT_ITERATIONS,
    polyline_length,
    polylines_bounds,
    smooth_contours,
)
from floorgrid.distance import compute_distance_field
from floorgrid.exceptions import MapStorageError
from floorgrid.grid import FloorMap, GridSpec, add_beacon, add_doorway, polyline_to_world
from floorgrid.log import configure_logging, get_logger
from floorgrid.storage import delete_map, list_maps, load_map, save_map
from floorgrid.tools import paths

logger = get_logger("floorgrid.cli")


# ---------------------------------------------------------------------------
# map commands
# ---------------------------------------------------------------------------

def cmd_new(args):
    """Handle the 'new' subcommand."""
    try:
        spec = GridSpec(
            resolution=args.resolution,
            width=args.width,
            height=args.height,
            origin_world_xz=(args.origin[0], args.origin[1]),
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    fmap = FloorMap(args.title, spec)
    path = save_map(fmap)
    print(f"Created map {str(fmap.id).upper()} ({spec.width}x{spec.height} @ {spec.resolution}m)")
    print(f"  Wrote: {path}")


def cmd_list(args):
    """Handle the 'list' subcommand."""
    maps = list_maps()
    if not maps:
        print(f"No maps found in {paths.maps_dir()}")
        return
    for map_id, title in maps:
        print(f"  {str(map_id).upper()}  {title}")


def cmd_delete(args):
    """Handle the 'delete' subcommand."""
    if not delete_map(args.map_id):
        print(f"No map {args.map_id} in {paths.maps_dir()}")
        sys.exit(1)
    print(f"Deleted {args.map_id}")


# ---------------------------------------------------------------------------
# derived artifacts
# ---------------------------------------------------------------------------

def cmd_contours(args):
    """Handle the 'contours' subcommand."""
    fmap = load_map(args.map_id)
    ctx = {"map_id": str(fmap.id), "command": "contours"}

    contours = smooth_contours(fmap, epsilon=args.epsilon, iterations=args.iterations)
    units = "grid"
    if args.world:
        contours = [polyline_to_world(fmap.spec, c) for c in contours]
        units = "m"

    total_len = sum(polyline_length(c) for c in contours)
    bounds = polylines_bounds(contours)
    logger.info("Contours: %d, total length %.2f %s", len(contours), total_len, units, extra=ctx)

    print(f"Contours: {len(contours)}")
    print(f"  Total length: {total_len:.2f} ({units})")
    if bounds is not None:
        minx, miny, maxx, maxy = bounds
        print(f"  Bounds: x=[{minx:.2f}, {maxx:.2f}], y=[{miny:.2f}, {maxy:.2f}]")

    if args.out:
        payload = {
            "mapId": str(fmap.id).upper(),
            "units": units,
            "contours": [[[float(x), float(y)] for (x, y) in c] for c in contours],
        }
        try:
            out_dir = os.path.dirname(args.out)
            if out_dir:
                os.makedirs(out_dir, exist_ok=True)
            with open(args.out, "w") as f:
                json.dump(payload, f, indent=2)
        except OSError as e:
            logger.error("Could not write contours: %s", e, extra={**ctx, "path": args.out})
            print(f"Error: could not write {args.out}: {e}", file=sys.stderr)
            sys.exit(1)
        print(f"  Wrote: {args.out}")


def cmd_distance(args):
    """Handle the 'distance' subcommand."""
    fmap = load_map(args.map_id)
    field = compute_distance_field(fmap)
    fmap.distance_field = field

    reachable = field.meters[np.isfinite(field.meters)]
    unreachable = int(field.meters.size - reachable.size)
    max_m = float(reachable.max()) if reachable.size else math.nan
    logger.info(
        "Distance field: max %.2fm, %d unreachable cells", max_m, unreachable,
        extra={"map_id": str(fmap.id), "command": "distance",
               "width": field.width, "height": field.height},
    )

    path = save_map(fmap)
    print(f"Distance field: {field.width}x{field.height}, max {max_m:.2f}m, unreachable {unreachable}")
    print(f"  Wrote: {path}")


# ---------------------------------------------------------------------------
# editing
# ---------------------------------------------------------------------------

def cmd_beacon(args):
    """Handle the 'beacon' subcommand."""
    fmap = load_map(args.map_id)
    b = add_beacon(fmap, (args.x, args.z), args.name)
    save_map(fmap)
    print(f"Added beacon {b.name!r} at ({args.x:.2f}, {args.z:.2f})")


def cmd_doorway(args):
    """Handle the 'doorway' subcommand."""
    fmap = load_map(args.map_id)
    walls_before = fmap.wall_count()
    d = add_doorway(fmap, (args.ax, args.az), (args.bx, args.bz), width=args.width)
    save_map(fmap)
    print(f"Added doorway (width {d.width:.2f}m), cleared {walls_before - fmap.wall_count()} wall cells")


# ---------------------------------------------------------------------------
# main
# ---------------------------------------------------------------------------

def build_parser():
    parser = argparse.ArgumentParser(
        prog="floorgrid",
        description="Occupancy grid contours and distance fields",
    )
    sub = parser.add_subparsers(dest="command")

    new_p = sub.add_parser("new", help="Create an empty map")
    new_p.add_argument("title")
    new_p.add_argument("--width", type=int, required=True, help="Cells along X")
    new_p.add_argument("--height", type=int, required=True, help="Cells along Z")
    new_p.add_argument("--resolution", type=float, required=True, help="Meters per cell")
    new_p.add_argument("--origin", type=float, nargs=2, default=(0.0, 0.0), metavar=("X", "Z"),
                       help="World XZ of cell (0,0)'s corner")
    new_p.set_defaults(func=cmd_new)

    list_p = sub.add_parser("list", help="List saved maps")
    list_p.set_defaults(func=cmd_list)

    contours_p = sub.add_parser("contours", help="Trace smooth wall contours")
    contours_p.add_argument("map_id")
    contours_p.add_argument("--epsilon", type=float, default=DEFAULT_EPSILON,
                            help="RDP tolerance in grid units")
    contours_p.add_argument("--iterations", type=int, default=DEFAULT_ITERATIONS,
                            help="Chaikin smoothing passes")
    contours_p.add_argument("--world", action="store_true",
                            help="Emit world meters instead of grid units")
    contours_p.add_argument("--out", default=None, help="Write contours JSON here")
    contours_p.set_defaults(func=cmd_contours)

    distance_p = sub.add_parser("distance", help="Compute and store the distance-to-wall field")
    distance_p.add_argument("map_id")
    distance_p.set_defaults(func=cmd_distance)

    beacon_p = sub.add_parser("beacon", help="Add a named beacon")
    beacon_p.add_argument("map_id")
    beacon_p.add_argument("x", type=float)
    beacon_p.add_argument("z", type=float)
    beacon_p.add_argument("name")
    beacon_p.set_defaults(func=cmd_beacon)

    doorway_p = sub.add_parser("doorway", help="Add a doorway and carve its corridor")
    doorway_p.add_argument("map_id")
    doorway_p.add_argument("ax", type=float)
    doorway_p.add_argument("az", type=float)
    doorway_p.add_argument("bx", type=float)
    doorway_p.add_argument("bz", type=float)
    doorway_p.add_argument("--width", type=float, default=0.9, help="Doorway width in meters")
    doorway_p.set_defaults(func=cmd_doorway)

    delete_p = sub.add_parser("delete", help="Delete a saved map")
    delete_p.add_argument("map_id")
    delete_p.set_defaults(func=cmd_delete)

    return parser


def main(argv=None):
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        sys.exit(1)
    try:
        args.func(args)
    except MapStorageError as e:
        logger.error("%s", e.message, extra={"command": args.command, **e.details})
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
