# Main script to find the next ISS passes over your current location.

import argparse
import sys
import requests
from dotenv import load_dotenv
from api_adapters import (
    GeoLookupAdapter, IpLookupAdapter, IpifyAdapter, IpWhoIsAdapter,
    IssFlyoverAdapter, PassLookupAdapter)
from api_errors import IssSpotterError
from api_structures import Coordinates, OperationResult, PassRecord


# --- Core Logic ---

def next_iss_times_for_my_location(
    ip_adapter: IpLookupAdapter | None = None,
    geo_adapter: GeoLookupAdapter | None = None,
    pass_adapter: PassLookupAdapter | None = None,
) -> OperationResult[list[PassRecord]]:
    """
    Chains the three lookups: public IP, then coordinates, then pass times.
    Stops at the first failed step and hands its error back untouched.
    """
    if ip_adapter is None or geo_adapter is None or pass_adapter is None:
        with requests.Session() as session:
            return _chain(
                ip_adapter or IpifyAdapter(session=session),
                geo_adapter or IpWhoIsAdapter(session=session),
                pass_adapter or IssFlyoverAdapter(session=session))
    return _chain(ip_adapter, geo_adapter, pass_adapter)


def _chain(
    ip_adapter: IpLookupAdapter,
    geo_adapter: GeoLookupAdapter,
    pass_adapter: PassLookupAdapter,
) -> OperationResult[list[PassRecord]]:
    ip_result = ip_adapter.fetch_my_ip()
    if not ip_result.ok:
        return ip_result

    coords_result = geo_adapter.fetch_coords_by_ip(ip_result.value)
    if not coords_result.ok:
        return coords_result

    return pass_adapter.fetch_flyover_times(coords_result.value)


def next_iss_times_for_coordinates(
    coords: Coordinates,
    pass_adapter: PassLookupAdapter | None = None,
) -> OperationResult[list[PassRecord]]:
    """Skips the location lookups when the coordinates are already known."""
    if pass_adapter is None:
        with requests.Session() as session:
            return IssFlyoverAdapter(session=session).fetch_flyover_times(coords)
    return pass_adapter.fetch_flyover_times(coords)


def format_pass(record: PassRecord) -> str:
    rise = record.rise_datetime()
    when = str(rise) if rise is not None else "unknown time"
    return f"Next pass at {when} for {record.duration} seconds!"


def print_pass_times(passes: list[PassRecord]):
    if not passes:
        print("No upcoming passes were returned.")
        return
    for record in passes:
        print(format_pass(record))


def describe_error(error: IssSpotterError) -> str:
    return f"{error.kind} during {error.stage} lookup: {error}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="ISS Spotter: Find the next passes of the ISS over your location.")
    parser.add_argument('-v', '--verbose', action='store_true',
                        help="Enable verbose mode to see the exact API calls being made.")
    parser.add_argument('--ip',
                        help="Geolocate this IP address instead of looking up your own.")
    parser.add_argument('--lat',
                        help="Latitude to use directly (requires --lon).")
    parser.add_argument('--lon',
                        help="Longitude to use directly (requires --lat).")
    return parser


def run(args: argparse.Namespace) -> OperationResult[list[PassRecord]]:
    """Picks the lookups to perform based on the command-line options."""
    with requests.Session() as session:
        pass_adapter = IssFlyoverAdapter(session=session, verbose=args.verbose)

        if args.lat is not None:
            coords = Coordinates(latitude=args.lat, longitude=args.lon)
            return next_iss_times_for_coordinates(coords, pass_adapter)

        geo_adapter = IpWhoIsAdapter(session=session, verbose=args.verbose)
        if args.ip is not None:
            coords_result = geo_adapter.fetch_coords_by_ip(args.ip)
            if not coords_result.ok:
                return coords_result
            return pass_adapter.fetch_flyover_times(coords_result.value)

        ip_adapter = IpifyAdapter(session=session, verbose=args.verbose)
        return next_iss_times_for_my_location(ip_adapter, geo_adapter, pass_adapter)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)
    if (args.lat is None) != (args.lon is None):
        parser.error("--lat and --lon must be given together.")

    try:
        result = run(args)
    except ValueError as e:
        print(e)
        return 1

    if not result.ok:
        print(f"It didn't work: {describe_error(result.error)}")
        return 1

    print_pass_times(result.value)
    return 0


if __name__ == '__main__':
    sys.exit(main())
