"""
Command-line interface for the Overpass to GeoJSON converter

Usage:
    overpass-geojson convert --input response.json --output features.geojson
    overpass-geojson query --query-file buildings.overpassql --output buildings.geojson
"""

import copy
import os
import sys
import json
import argparse
from typing import Any, Dict, List, Optional

from loguru import logger

from .config import OVERPASS_ENDPOINTS, get_config, validate_config
from .models import validate_feature_collection
from .osm import OSMCollector, osm2geojson, parse_element_tags


def setup_logging(verbose: bool = False):
    """Configure logging"""
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{message}</cyan>",
        level=level
    )


def write_geojson(geojson: Dict[str, Any], output_path: Optional[str]) -> None:
    """Validate and write a FeatureCollection to a file, or to stdout"""
    collection = validate_feature_collection(geojson)
    data = collection.model_dump()

    if not output_path:
        json.dump(data, sys.stdout, ensure_ascii=False)
        sys.stdout.write("\n")
        return

    os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    logger.info(f"Wrote {len(collection.features)} features to {output_path}")


def cmd_convert(args):
    """Convert a saved Overpass JSON response to GeoJSON"""
    setup_logging(args.verbose)

    if not os.path.exists(args.input):
        logger.error(f"Input file not found: {args.input}")
        return 1

    try:
        with open(args.input, "r", encoding="utf-8") as f:
            data = json.load(f)

        elements = data.get("elements", []) if isinstance(data, dict) else data
        logger.info(f"Converting {len(elements)} elements from {args.input}")

        if args.parse_tags:
            elements = [parse_element_tags(element) for element in elements]

        geojson = osm2geojson(
            elements,
            outer_clockwise=not args.counterclockwise,
            include_relations=args.include_relations
        )
        write_geojson(geojson, args.output)
        return 0

    except Exception as e:
        logger.error(f"Failed to convert {args.input}: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


def cmd_query(args):
    """Run an Overpass query and write the result as GeoJSON"""
    setup_logging(args.verbose)

    if args.query_file:
        if not os.path.exists(args.query_file):
            logger.error(f"Query file not found: {args.query_file}")
            return 1
        with open(args.query_file, "r", encoding="utf-8") as f:
            query = f.read()
    else:
        query = args.query

    config = copy.deepcopy(get_config())
    if args.endpoint:
        config.api.overpass_endpoint = args.endpoint
    if args.cache_dir:
        config.cache_dir = args.cache_dir

    try:
        validate_config(config)
        collector = OSMCollector(config=config)

        if args.raw:
            data = collector.fetch(query)
            if args.output:
                with open(args.output, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                logger.info(f"Wrote raw response to {args.output}")
            else:
                print(json.dumps(data, ensure_ascii=False))
            return 0

        geojson = collector.fetch_geojson(
            query,
            parse_tags=args.parse_tags,
            outer_clockwise=not args.counterclockwise,
            include_relations=args.include_relations
        )
        write_geojson(geojson, args.output)
        return 0

    except Exception as e:
        logger.error(f"Overpass query failed: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


def _add_conversion_flags(parser: argparse.ArgumentParser):
    parser.add_argument("--parse-tags", action="store_true", help="Coerce tag values to booleans/numbers")
    parser.add_argument("--include-relations", action="store_true",
                        help="Keep relation memberships in feature properties")
    parser.add_argument("--counterclockwise", action="store_true",
                        help="Wind outer rings counterclockwise (holes clockwise)")


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        description="Convert OpenStreetMap Overpass data to GeoJSON",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Convert a saved Overpass response:
    overpass-geojson convert --input response.json --output features.geojson

  Query Overpass directly:
    overpass-geojson query --query '[out:json];node["amenity"="cafe"](51.5,-0.13,51.51,-0.12);out;'
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Convert command
    convert_parser = subparsers.add_parser("convert", help="Convert an Overpass JSON file")
    convert_parser.add_argument("--input", "-i", required=True, help="Overpass JSON response file")
    convert_parser.add_argument("--output", "-o", help="Output GeoJSON file (stdout if not specified)")
    _add_conversion_flags(convert_parser)
    convert_parser.set_defaults(func=cmd_convert)

    # Query command
    query_parser = subparsers.add_parser("query", help="Query Overpass and convert the result")
    source = query_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--query", "-q", help="Overpass QL query text")
    source.add_argument("--query-file", help="File containing the Overpass QL query")
    query_parser.add_argument("--output", "-o", help="Output file (stdout if not specified)")
    query_parser.add_argument("--endpoint", choices=sorted(OVERPASS_ENDPOINTS), help="Overpass endpoint")
    query_parser.add_argument("--cache-dir", help="Directory for cached raw responses")
    query_parser.add_argument("--raw", action="store_true", help="Write the raw Overpass response")
    _add_conversion_flags(query_parser)
    query_parser.set_defaults(func=cmd_query)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
