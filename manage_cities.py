#!/usr/bin/env python3
"""
Manage cities from the command line.

Talks to the city API through :class:`city_crud_client.CityCrudClient`,
so requests go to the first candidate base URL that answers (see
``CITY_API_BASES``).  After every change the full city list is fetched
again and printed, so the output always reflects what the server
holds.

Usage:
    python manage_cities.py list
    python manage_cities.py add "Addis Ababa" Ethiopia
    python manage_cities.py update 3 --country France
    python manage_cities.py delete 3 --yes
    python manage_cities.py --base http://localhost:3000/cities get 3
"""

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional, Sequence

from city_crud_client import CityCrudClient


def render_table(cities: List[Dict[str, Any]]) -> str:
    """Format cities as a fixed width text table."""
    rows = [("ID", "NAME", "COUNTRY")]
    rows += [(str(c.get("id", "")), str(c.get("name", "")), str(c.get("country", ""))) for c in cities]
    widths = [max(len(row[i]) for row in rows) for i in range(3)]
    lines = ["  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip() for row in rows]
    lines.insert(1, "  ".join("-" * width for width in widths))
    lines.append(f"{len(cities)} cities")
    return "\n".join(lines)


def show_cities(client: CityCrudClient) -> int:
    cities, error = client.list_cities()
    if error:
        print(f"[!] {error['message']}", file=sys.stderr)
        return 1
    print(render_table(cities))
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="List, add, edit and delete cities.")
    ap.add_argument(
        "--base",
        action="append",
        dest="bases",
        help="Base URL of the cities collection. Repeat to give fallbacks in order.",
    )
    ap.add_argument("--timeout", type=float, default=10, help="Per-request timeout in seconds.")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log every request attempt.")
    sub = ap.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="Show all cities")

    get_p = sub.add_parser("get", help="Show one city")
    get_p.add_argument("id")

    add_p = sub.add_parser("add", help="Create a city")
    add_p.add_argument("name")
    add_p.add_argument("country")

    upd_p = sub.add_parser("update", help="Change a city's name and/or country")
    upd_p.add_argument("id")
    upd_p.add_argument("--name")
    upd_p.add_argument("--country")

    del_p = sub.add_parser("delete", help="Delete a city")
    del_p.add_argument("id")
    del_p.add_argument("--yes", action="store_true", help="Do not ask for confirmation.")
    return ap


def main(argv: Optional[Sequence[str]] = None, client: Optional[CityCrudClient] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.ERROR,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    client = client or CityCrudClient(args.bases, timeout=args.timeout)

    if args.command == "list":
        return show_cities(client)

    if args.command == "get":
        city, error = client.get_city(args.id)
        if error:
            print(f"[!] {error['message']}", file=sys.stderr)
            return 2
        print(render_table([city]))
        return 0

    if args.command == "add":
        city, error = client.create_city(args.name, args.country)
        if error:
            print(f"[!] {error['message']}", file=sys.stderr)
            return 2
        print(f"[+] Created city {city['id']}: {city['name']}, {city['country']}")
    elif args.command == "update":
        city, error = client.update_city(args.id, name=args.name, country=args.country)
        if error:
            print(f"[!] {error['message']}", file=sys.stderr)
            return 2
        print(f"[+] Updated city {city['id']}: {city['name']}, {city['country']}")
    elif args.command == "delete":
        if not args.yes:
            answer = input("Are you sure you want to delete this city? [y/N] ")
            if answer.strip().lower() not in {"y", "yes"}:
                print("Aborted.")
                return 0
        _, error = client.delete_city(args.id)
        if error:
            print(f"[!] {error['message']}", file=sys.stderr)
            return 2
        print(f"[+] Deleted city {args.id}")

    # Refresh so the user sees the list as the server now has it
    return show_cities(client)


if __name__ == "__main__":
    sys.exit(main())
