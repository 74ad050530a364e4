#!/usr/bin/env python3
"""
Call Hierarchy CLI

Prints the complete caller hierarchy of a Go function: the function at the
given position, every function that calls it, every function calling those,
and so on until no new callers turn up.

Installation:
    pip install loguru
    go install golang.org/x/tools/gopls@latest

Usage:
    call-hierarchy main.go:10:6
    call-hierarchy -m main.go:10:6 > hierarchy.mmd
    call-hierarchy --dot -o hierarchy.dot main.go:10:6
"""

import argparse
import sys
from typing import List, Optional

from loguru import logger

from hierarchy_builder import HierarchyBuilder, summarize
from hierarchy_config import GOPLS_ENV_VAR, HierarchyConfig
from oracle_client import GoplsOracle, HierarchyError
from renderers import render


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="call-hierarchy",
        description="Build the caller hierarchy of a Go function using gopls",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
    call-hierarchy main.go:10:6                  # JSON to stdout
    call-hierarchy -m main.go:10:6               # Mermaid flowchart
    call-hierarchy --dot -o out.dot main.go:10:6 # Graphviz file
    call-hierarchy -v main.go:10:6               # Log every gopls call

Environment:
    {GOPLS_ENV_VAR}    path to the gopls binary (default: gopls)
        """,
    )

    parser.add_argument("position", help="Source position, e.g. file.go:10:6")

    output_group = parser.add_mutually_exclusive_group()
    output_group.add_argument(
        "--mermaid",
        "-m",
        action="store_true",
        help="Output in Mermaid format instead of JSON",
    )
    output_group.add_argument(
        "--dot", action="store_true", help="Output in Graphviz DOT format instead of JSON"
    )

    parser.add_argument("--output", "-o", help="Write output to a file instead of stdout")
    parser.add_argument("--gopls", help="Path to the gopls binary")
    parser.add_argument(
        "--no-cycle-guard",
        action="store_true",
        help="Re-expand callers already on the current path (may not terminate)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose/debug output"
    )

    return parser


def configure_logging(verbose: bool = False):
    """Send logs to stderr so stdout only carries the rendered hierarchy"""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "WARNING",
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )


def write_output(text: str, output_file: Optional[str] = None):
    if output_file is None:
        print(text)
        return

    with open(output_file, "w", encoding="utf-8") as f:
        f.write(text + "\n")
    logger.info(f"📄 Hierarchy written to {output_file}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = HierarchyConfig.from_args(args)
    configure_logging(config.verbose)

    oracle = GoplsOracle(config.gopls_path)
    if not oracle.is_available():
        logger.error(
            f"❌ gopls not found at '{config.gopls_path}'. "
            f"Install with: go install golang.org/x/tools/gopls@latest"
        )
        return 1

    builder = HierarchyBuilder(oracle, cycle_guard=config.cycle_guard)

    try:
        root = builder.build(config.position)
    except HierarchyError as e:
        logger.error(f"❌ {e}")
        return 1
    except RecursionError:
        if config.cycle_guard:
            logger.error("💥 Call hierarchy too deep to build")
        else:
            logger.error(
                "💥 Call hierarchy too deep, the call graph is probably cyclic. "
                "Run without --no-cycle-guard."
            )
        return 1

    summary = summarize(root)
    logger.info(
        f"📊 {summary.functions} functions, {summary.errors} errors, "
        f"depth {summary.max_depth}"
    )

    try:
        write_output(render(root, config.output_format), config.output_file)
    except OSError as e:
        logger.error(f"❌ Could not write output: {e}")
        return 1

    return 0


def run():
    try:
        exit_code = main()
        sys.exit(exit_code)
    except KeyboardInterrupt:
        print("\n👋 Interrupted by user", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    run()
