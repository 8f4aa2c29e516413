#!/usr/bin/env python3
"""
epsg-transform command line tool

Reprojects every coordinate of a GeoJSON document from one EPSG coordinate
reference system to another.

    epsg-transform 4326 25832 parcels.geojson -o parcels_utm32.geojson
    cat points.geojson | epsg-transform 25832 4326
"""
import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

import geojson

from .config import get_settings
from .engine import configure_proj_network
from .exceptions import TransformError
from .logging_config import setup_logging
from .transformer import Transformer

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="epsg-transform",
        description="Reproject a GeoJSON document between EPSG coordinate reference systems"
    )
    parser.add_argument('source', type=int, help='EPSG code of the input coordinates (e.g. 4326)')
    parser.add_argument('target', type=int, help='EPSG code of the output coordinates (e.g. 25832)')
    parser.add_argument('input', nargs='?', default='-',
                        help='GeoJSON file to read (default: stdin)')
    parser.add_argument('-o', '--output', default='-',
                        help='File to write the reprojected GeoJSON to (default: stdout)')
    parser.add_argument('--indent', type=int, default=None,
                        help='Indent the output JSON by this many spaces')
    parser.add_argument('--log-level', default=None,
                        help='Log level (default: LOG_LEVEL setting)')
    parser.add_argument('--json-logs', action='store_true',
                        help='Emit structured JSON log lines')
    return parser


def read_document(path: str) -> Dict[str, Any]:
    if path == '-':
        return json.load(sys.stdin)
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def write_document(document: Dict[str, Any], path: str, indent: Optional[int] = None) -> None:
    if path == '-':
        json.dump(document, sys.stdout, indent=indent)
        sys.stdout.write('\n')
        return
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(document, f, indent=indent)


def validation_errors(document: Any) -> Optional[str]:
    """Describe why `document` is not valid GeoJSON, or None when it is"""
    if not isinstance(document, dict):
        return f"expected a JSON object, got {type(document).__name__}"
    try:
        instance = geojson.GeoJSON.to_instance(document, strict=True)
    except (ValueError, TypeError) as e:
        return str(e)
    if not instance.is_valid:
        return str(instance.errors())
    return None


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings()
    except TransformError as e:
        print(f"epsg-transform: {e.message}", file=sys.stderr)
        return EXIT_FAILED

    setup_logging(
        args.log_level or settings.LOG_LEVEL,
        use_json=args.json_logs or settings.LOG_FORMAT == "json",
    )
    configure_proj_network(settings.PROJ_NETWORK_ENABLED)

    try:
        document = read_document(args.input)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Could not read {args.input}: {e}")
        return EXIT_FAILED

    problem = validation_errors(document)
    if problem is not None:
        logger.error(f"Input is not valid GeoJSON: {problem}")
        return EXIT_FAILED

    try:
        with Transformer.setup(args.source, args.target, settings=settings) as transformer:
            result = transformer.transform(document)
    except TransformError as e:
        logger.error(f"Transformation EPSG:{args.source} -> EPSG:{args.target} failed: {e.message}")
        return EXIT_FAILED

    try:
        write_document(result, args.output, args.indent)
    except OSError as e:
        logger.error(f"Could not write {args.output}: {e}")
        return EXIT_FAILED

    logger.info(f"Reprojected {args.input} from EPSG:{args.source} to EPSG:{args.target}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
