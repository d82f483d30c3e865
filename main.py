#!/usr/bin/env python3
"""
Disaster Comm Network - Nearest Responder Discovery
===================================================

Finds the nearest Hospital, Police station, Rescuer or Survivor for an
actor's role over a k-nearest-neighbor proximity graph (Bellman-Ford
relaxation), and broadcasts messages to role-visible entities.

Usage:
    python main.py --lat 13.08 --lon 80.27 --by-role       # Nearest for the role
    python main.py --lat 13.08 --lon 80.27 --nearest Police
    python main.py --role Police --visible -m "Flood alert"
    python main.py --entities city.json --lat ... --lon ...
    python main.py --test                                   # Run the tests
    python main.py --check                                  # Check dependencies

Requirements:
    - Python 3.10+
    - networkx, numpy
"""

import sys
import json
import argparse
import logging


def load_entity_file(path: str):
    """Read a JSON list of {lat, lon, name, type} records."""
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get('entities', [])
    return data


def print_delivery(index, entity, message):
    """Notifier used by the CLI: one line per delivered message."""
    suffix = f" <- {message}" if message else ""
    print(f"  -> #{index} {entity.entity_type.value}: {entity.display_name}{suffix}")


def print_route(route):
    """Route callback used by the CLI."""
    print(f"  Route ({route.hops} hops, {route.distance_meters:.0f} m):")
    for index, (lat, lon) in zip(route.path, route.positions):
        print(f"    [{index}] {lat:.5f}, {lon:.5f}")


def run_cli(args):
    """Run one round of queries against the loaded city."""
    from disaster_comm.algorithms.base import RoutingConfig
    from disaster_comm.data.sample_data import sample_city
    from disaster_comm.dispatch import Dispatcher, MessageCenter, Session

    session = Session(role=args.role)
    if args.entities:
        records = load_entity_file(args.entities)
        center = None
    else:
        records, center = sample_city()

    with session.loading():
        session.load_entities(records, center=center)

    stats = session.registry.get_stats()
    print("Disaster Comm Network")
    print("=" * 50)
    print(f"  Entities: {stats.total_entities}")
    for type_name, count in stats.by_type.items():
        print(f"    {type_name:10} {count}")
    print(f"  Role: {session.active_role}")

    if args.lat is not None and args.lon is not None:
        session.set_requester_location(args.lat, args.lon)
        print(f"  Location: {args.lat:.5f}, {args.lon:.5f}")

    config = RoutingConfig(k_neighbors=args.k, max_edge_meters=args.max_edge)
    dispatcher = Dispatcher(session, config=config, notifier=print_delivery,
                            route_callback=print_route if args.route else None)
    messages = MessageCenter(dispatcher)

    if args.by_role:
        messages.nearest_by_role()
    if args.nearest:
        messages.nearest_of(args.nearest)
    if args.broadcast:
        messages.send(args.broadcast, args.message)
    if args.visible:
        messages.send("Visible", args.message)
    if args.sos:
        messages.simulate_sos()

    print("\nMessage log:")
    for line in messages.log.lines():
        print(f"  {line}")


def run_tests():
    """Run the unit tests with pytest."""
    print("Running tests...")

    import subprocess
    result = subprocess.run(
        [sys.executable, "-m", "pytest", "tests/", "-v", "--tb=short"],
        cwd=sys.path[0] or "."
    )
    sys.exit(result.returncode)


def check_dependencies():
    """Report which required libraries are installed."""
    print("Dependency check")
    print("=" * 50)

    dependencies = [
        ("networkx", "networkx"),
        ("numpy", "numpy"),
        ("pytest", "pytest"),
    ]

    all_ok = True
    for name, package in dependencies:
        try:
            __import__(package)
            status = "OK"
        except ImportError:
            status = "MISSING"
            all_ok = False

        print(f"  {name:15} [{status}]")

    print()
    if all_ok:
        print("All dependencies installed!")
    else:
        print("Some dependencies are missing. Run:")
        print("  pip install -e .[test]")

    return all_ok


def main():
    """
    Application entry point.

    Parses the command line and runs the selected mode:
    - default: query the loaded city
    - --test: run the tests
    - --check: check dependencies
    """
    parser = argparse.ArgumentParser(
        description="Disaster Comm Network - Nearest Responder Discovery",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --lat 13.08 --lon 80.27 --by-role
  python main.py --role Rescuer --lat 13.08 --lon 80.27 --nearest Survivor --route
  python main.py --role Police --visible -m "Evacuate low-lying areas"
  python main.py --lat 13.08 --lon 80.27 --sos
        """
    )

    parser.add_argument("--entities", help="JSON file with {lat, lon, name, type} records")
    parser.add_argument("--role", default="Survivor",
                        help="Active role: Hospital, Police, Rescuer or Survivor")
    parser.add_argument("--lat", type=float, help="Your latitude")
    parser.add_argument("--lon", type=float, help="Your longitude")
    parser.add_argument("--by-role", action="store_true",
                        help="Find the nearest counterpart for the role")
    parser.add_argument("--nearest", metavar="TYPE", help="Find the nearest entity of a type")
    parser.add_argument("--route", action="store_true", help="Print the hop-by-hop route")
    parser.add_argument("--broadcast", metavar="RECIPIENT",
                        help="Send to All, Hospitals, Police, Rescuers, Survivors, "
                             "'Nearest Rescuer' or 'Nearest Hospital'")
    parser.add_argument("--visible", action="store_true",
                        help="Send to entities visible to the role")
    parser.add_argument("-m", "--message", default="Status check", help="Message text")
    parser.add_argument("--sos", action="store_true", help="Simulate a survivor SOS")
    parser.add_argument("--k", type=int, default=4, help="Neighbors per node")
    parser.add_argument("--max-edge", type=float, default=8000.0,
                        help="Maximum edge length in meters")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--test", action="store_true", help="Run the tests")
    parser.add_argument("--check", action="store_true", help="Check dependencies")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    if args.check:
        check_dependencies()
    elif args.test:
        run_tests()
    else:
        run_cli(args)


if __name__ == "__main__":
    main()
