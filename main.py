"""
main.py
-------
Command-line front end for the NYC WiFi spot finder.

Examples
    wifi-spots --search "Bryant Park"
    wifi-spots --search 10001 --pages 2
    wifi-spots --near 40.7536,-73.9832 --radius 0.5
    wifi-spots --borough Brooklyn --type Free --text library
    wifi-spots --search 11201 --route 3 8 15 --map route.html
    wifi-spots --search "Union Square" --map spot.html --focus 42
"""
import argparse
import logging
import sys
from typing import Optional, Sequence, Tuple

from config import WIFI_DATA_PATH
from map_visualization import create_spots_map, route_directions, save_and_open_map, spot_card
from spot_finder import WifiSpotFinder


def _parse_point(value: str) -> Tuple[float, float]:
    try:
        lat, lon = (float(part) for part in value.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError("expected LAT,LON")
    return lat, lon


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wifi-spots", description="Find public WiFi spots in New York City.")
    parser.add_argument("--data", default=WIFI_DATA_PATH, help="dataset CSV path or URL")

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--search", metavar="QUERY", help="address, place or ZIP code")
    mode.add_argument("--near", metavar="LAT,LON", type=_parse_point, help="search around a known position")

    parser.add_argument("--borough", default="", help="borough filter")
    parser.add_argument("--type", dest="spot_type", default="", help="connection type filter")
    parser.add_argument("--text", default=None, help="text filter used with --borough/--type")
    parser.add_argument("--radius", default=None, help="search radius in miles (default 2)")
    parser.add_argument("--pages", type=int, default=1, help="number of result pages to show")
    parser.add_argument("--route", type=int, nargs="+", metavar="ID", help="spot ids to walk between (2-5)")
    parser.add_argument("--map", metavar="FILE", help="write an HTML map of the results")
    parser.add_argument("--focus", type=int, metavar="ID", help="open the map zoomed in on one spot")
    parser.add_argument("--open", action="store_true", help="open the map in a browser")
    parser.add_argument("--list-filters", action="store_true", help="print borough and type values and exit")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def _print_alerts(app: WifiSpotFinder) -> None:
    for alert in app.pop_alerts():
        print(f"⚠️  {alert}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if (args.search or args.near is not None) and (args.borough or args.spot_type or args.text):
        parser.error("--borough/--type/--text cannot be combined with --search or --near")
    if args.focus is not None and not args.map:
        parser.error("--focus requires --map")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # a fixed --near position stands in for device geolocation
    locate = (lambda: args.near) if args.near is not None else None
    app = WifiSpotFinder(args.data, locate=locate)
    if not app.load():
        print(f"❌ {app.message}")
        return 1

    if args.list_filters:
        print("Boroughs:", ", ".join(app.boroughs))
        print("Types:   ", ", ".join(app.types))
        return 0

    if args.radius is not None:
        app.set_radius(args.radius)

    if args.search:
        app.search(args.search)
    elif args.near is not None:
        app.find_near_me()
    elif args.borough or args.spot_type or args.text:
        app.apply_filters(args.borough, args.spot_type, args.text)
    _print_alerts(app)

    if args.route:
        app.toggle_route_mode()
        for spot_id in args.route:
            app.toggle_route_spot(spot_id)
            _print_alerts(app)

    for _ in range(max(args.pages, 1) - 1):
        app.load_more()

    if app.message:
        print(f"❌ {app.message}")
    else:
        shown = app.visible
        print(f"✅ {app.spot_count} spots found (showing {len(shown)})\n")
        for spot in shown:
            print(spot_card(spot, route_mode=app.route.active, selected=app.is_selected(spot.id)))
            print()
        if app.has_more:
            print(f"... {app.spot_count - len(shown)} more, use --pages {app.query.page + 1}")

    if app.route_message:
        print(app.route_message)
    if app.routes:
        print(route_directions(app.routes[0]))

    if args.map:
        route = app.routes[0] if app.routes else None
        focus = None
        if args.focus is not None:
            focus = app.spots_by_id.get(args.focus)
            if focus is None:
                print(f"⚠️  No spot with id {args.focus}, showing the full map")
        spots_map = create_spots_map(
            app.query.results, center=app.query.center, route=route, stops=app.route_spots, focus=focus
        )
        path = save_and_open_map(spots_map, args.map, open_browser=args.open)
        print(f"🗺  Map written to {path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
