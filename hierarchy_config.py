#!/usr/bin/env python3
"""
Configuration for the call hierarchy tool.

Values come from the command line, with the gopls location falling back to
the CALL_HIERARCHY_GOPLS environment variable.
"""

import os
from argparse import Namespace
from dataclasses import dataclass
from typing import Mapping, Optional

from renderers import RENDERERS


GOPLS_ENV_VAR = "CALL_HIERARCHY_GOPLS"
DEFAULT_GOPLS = "gopls"


@dataclass
class HierarchyConfig:
    """Settings for one run of the tool"""

    position: str
    output_format: str = "json"
    output_file: Optional[str] = None  # None writes to stdout
    gopls_path: str = DEFAULT_GOPLS
    cycle_guard: bool = True
    verbose: bool = False

    def __post_init__(self):
        if self.output_format not in RENDERERS:
            raise ValueError(
                f"Unsupported output format '{self.output_format}', "
                f"expected one of {sorted(RENDERERS)}"
            )

    @classmethod
    def from_args(
        cls, args: Namespace, environ: Optional[Mapping[str, str]] = None
    ) -> "HierarchyConfig":
        if environ is None:
            environ = os.environ

        if args.mermaid:
            output_format = "mermaid"
        elif args.dot:
            output_format = "dot"
        else:
            output_format = "json"

        gopls_path = args.gopls or environ.get(GOPLS_ENV_VAR) or DEFAULT_GOPLS

        return cls(
            position=args.position,
            output_format=output_format,
            output_file=args.output,
            gopls_path=gopls_path,
            cycle_guard=not args.no_cycle_guard,
            verbose=args.verbose,
        )
