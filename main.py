#!/usr/bin/env python3
"""
Command-line front end of the vendor line-item extraction engine.

The input is text already extracted from a vendor PDF; the output is
the JSON form of the ExtractionResult (records plus diagnostics).

Usage:
    python main.py --input invoice.txt --vendor wyncken
    python main.py --input invoice.txt --vendor armedangels --output result.json --validate
    python main.py --input invoice.txt --vendor ./my_vendor.yaml
    python main.py --list-vendors

From Python:
    from main import run_extraction
    output = run_extraction("invoice.txt", "wyncken")
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import ConfigurationManager
from vendor_extraction import __version__
from vendor_extraction.utils.exceptions import InputFileNotFoundError, VendorExtractionError
from vendor_extraction.utils.logger import get_logger, set_level, setup_logger_from_config
from vendor_extraction.utils.helpers import ensure_directory, get_file_extension, validate_file_exists

SCHEMA_FILE_EXTENSIONS = ('.yaml', '.yml')


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments (sys.argv[1:] when argv is None)."""
    parser = argparse.ArgumentParser(
        prog="vendor-extract",
        description="Extract line items from vendor invoice and catalog text",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "The --vendor value is either a registered vendor name "
            "(see --list-vendors) or the path of a schema YAML file."
        )
    )

    source = parser.add_argument_group("input / output")
    source.add_argument("--input", "-i", help="Text file holding the extracted document text")
    source.add_argument("--vendor", "-v", help="Vendor schema name or schema file path")
    source.add_argument("--output", "-o", help="Write the JSON result here instead of stdout")

    options = parser.add_argument_group("options")
    options.add_argument("--config", "-c", help="Custom settings file, laid over the defaults")
    options.add_argument("--validate", action="store_true",
                         help="Attach a record validation report to the result")
    options.add_argument("--list-vendors", action="store_true",
                         help="Print the registered vendor schemas and exit")
    options.add_argument("--debug", action="store_true", help="Log at DEBUG level")

    args = parser.parse_args(argv)

    if not args.list_vendors and not (args.input and args.vendor):
        parser.error("--input and --vendor are required unless --list-vendors is given")
    return args


def initialize_system(args: argparse.Namespace) -> ConfigurationManager:
    """
    Load settings (a fresh load when --config is given) and attach log handlers.

    Args:
        args: Parsed command-line arguments.

    Returns:
        The configuration manager in effect for this run.
    """
    if args.config:
        ConfigurationManager.reset()
    config = ConfigurationManager(args.config)

    logger = setup_logger_from_config()
    if args.debug:
        set_level("DEBUG")

    logger.info(f"Vendor line-item extraction v{config.get('project.version', __version__)}")
    if args.input:
        logger.info(f"Input: {args.input} | Vendor: {args.vendor}")

    return config


def load_schema(vendor: str):
    """
    Resolve the --vendor argument.

    A value ending in .yaml/.yml is read as a schema file, anything else
    is looked up among the registered vendor schemas.
    """
    from vendor_extraction.schema import load_schema_file, load_vendor_schema

    if get_file_extension(vendor) in SCHEMA_FILE_EXTENSIONS:
        return load_schema_file(vendor)
    return load_vendor_schema(vendor)


def write_output(output: Dict[str, Any], output_path: str) -> Path:
    """Write the result dictionary as indented UTF-8 JSON."""
    target = Path(output_path)
    ensure_directory(target.parent)
    with open(target, 'w', encoding='utf-8') as f:
        json.dump(output, f, indent=2, ensure_ascii=False)
    return target


def run_extraction(
    input_path: str,
    vendor: str,
    output_path: Optional[str] = None,
    config_path: Optional[str] = None,
    validate: bool = False
) -> Dict[str, Any]:
    """
    Extract line items from one text file.

    The file holds text already pulled out of the PDF, one physical line
    per line. Undecodable bytes are replaced rather than rejected.

    Args:
        input_path: Text file to scan.
        vendor: Vendor schema name or schema file path.
        output_path: Where to write the JSON result, if anywhere.
        config_path: Custom settings file.
        validate: Attach a RecordValidator report under "validation".

    Returns:
        ExtractionResult.to_dict() plus "source_file" (and "validation").

    Raises:
        InputFileNotFoundError: If input_path is not a file.
        SchemaError: If the vendor schema is unknown or invalid.

    Example:
        >>> output = run_extraction("invoice.txt", "wyncken")
        >>> [(r["item_code"], r["size"], r["quantity"]) for r in output["records"]]
    """
    from vendor_extraction.scanner import extract_text
    from vendor_extraction.postprocessor import RecordValidator

    logger = get_logger(__name__)
    ConfigurationManager(config_path)

    if not validate_file_exists(input_path):
        raise InputFileNotFoundError(str(input_path))

    schema = load_schema(vendor)
    logger.info(f"Schema '{schema.name}', window bound {schema.window_bound}")

    text = Path(input_path).read_text(encoding="utf-8", errors="replace")
    result = extract_text(text, schema)

    output = result.to_dict()
    output['source_file'] = str(input_path)

    if validate:
        report = RecordValidator().validate(result)
        output['validation'] = report.to_dict()
        for message in report.warnings:
            logger.warning(message)
        for message in report.errors:
            logger.error(message)

    if output_path:
        logger.info(f"JSON written to {write_output(output, output_path)}")

    logger.info(f"{result.record_count} records, {len(result.diagnostics)} diagnostics")
    return output


def list_vendors() -> List[str]:
    """Print the registered vendor names, one per line."""
    from vendor_extraction.schema import available_vendors

    vendors = available_vendors()
    print("\n".join(vendors))
    return vendors


def main(argv: Optional[List[str]] = None) -> int:
    """
    Command-line entry point.

    Returns:
        0 on success, 1 on a schema, settings, input or I/O error, 130 when interrupted.
    """
    try:
        args = parse_arguments(argv)
        initialize_system(args)

        if args.list_vendors:
            list_vendors()
            return 0

        output = run_extraction(
            input_path=args.input,
            vendor=args.vendor,
            output_path=args.output,
            config_path=args.config,
            validate=args.validate
        )
        if not args.output:
            print(json.dumps(output, indent=2, ensure_ascii=False))
        return 0

    except (VendorExtractionError, OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
