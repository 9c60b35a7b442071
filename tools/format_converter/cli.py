"""CLI interface for Format Converter."""

import sys
from pathlib import Path
from typing import Optional

import click

from shared.cli import error, handle_errors, info, success
from shared.logger import setup_logger

from .converter import FormatConverter
from .detector import detect_format
from .formats import AUTO, ConversionFormat
from .validators import validate

FORMAT_CHOICES = ["json", "yaml", "xml", "toml"]


@click.command()
@click.argument("input_file", type=click.Path(exists=True, allow_dash=True, path_type=Path))
@click.option(
    "--to",
    "-t",
    "to_format",
    type=click.Choice(FORMAT_CHOICES, case_sensitive=False),
    help="Target format",
)
@click.option(
    "--from",
    "-f",
    "from_format",
    type=click.Choice(FORMAT_CHOICES + [AUTO], case_sensitive=False),
    help="Source format (guessed from extension or content if not specified)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    help="Output file (print to stdout if not specified)",
)
@click.option(
    "--query",
    "-q",
    help="JMESPath query to extract data",
)
@click.option(
    "--minify",
    is_flag=True,
    help="Minify output (JSON and XML)",
)
@click.option(
    "--indent",
    type=int,
    default=2,
    show_default=True,
    help="Indentation level",
)
@click.option(
    "--xml-root",
    default="data",
    show_default=True,
    help="Root element name for XML output",
)
@click.option("--verify", is_flag=True, help="Check the output with a reference parser")
@click.option("--detect", "detect_only", is_flag=True, help="Only print the detected format")
@click.option("--check", "check_only", is_flag=True, help="Only validate the input")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@handle_errors
def main(
    input_file: Path,
    to_format: Optional[str],
    from_format: Optional[str],
    output: Optional[Path],
    query: Optional[str],
    minify: bool,
    indent: int,
    xml_root: str,
    verify: bool,
    detect_only: bool,
    check_only: bool,
    verbose: bool,
):
    """
    Format Converter - Convert between JSON, YAML, XML, and TOML.

    Use - as INPUT_FILE to read from stdin.

    Examples:

        \b
        # Convert JSON to YAML
        data-convert config.json --to yaml

        \b
        # Convert with output file
        data-convert data.toml --to json --output data.json

        \b
        # Query and convert
        data-convert users.json --to yaml --query 'users[0]'

        \b
        # Detect the format of piped input
        cat unknown.txt | data-convert - --detect

        \b
        # Validate only
        data-convert settings.yaml --check
    """
    # Setup logging
    log_level = "DEBUG" if verbose else "INFO"
    setup_logger(__name__, level=log_level)

    converter = FormatConverter(indent=indent, xml_root=xml_root, verify_output=verify)

    # Load input
    if str(input_file) == "-":
        text = click.get_text_stream("stdin").read()
        source = from_format or AUTO
    else:
        info(f"Loading {input_file}")
        text, source = converter.load_file(input_file, format=from_format)

    if detect_only:
        detected = detect_format(text)
        if detected == ConversionFormat.UNKNOWN:
            error("Could not auto-detect format. Please select manually.")
            sys.exit(1)
        click.echo(detected.value)
        sys.exit(0)

    if check_only:
        fmt = detect_format(text) if source == AUTO else ConversionFormat(source)
        is_valid, message = validate(text, fmt)
        if not is_valid:
            error(f"Invalid {fmt.value.upper()}: {message}")
            sys.exit(1)
        success(f"Valid {fmt.value.upper()}")
        sys.exit(0)

    if not to_format:
        raise click.UsageError("Missing option '--to' / '-t'.")

    result = converter.convert(text, source, to_format.lower(), query=query, minify=minify)

    if not result.ok:
        error(str(result.error))
        sys.exit(1)

    # Output
    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(result.output)
        success(f"Converted {result.from_format.value} to {output}")
    else:
        click.echo(result.output.rstrip("\n"))

    sys.exit(0)


if __name__ == "__main__":
    main()
