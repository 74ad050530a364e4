#!/usr/bin/env python3
"""
Parsers for gopls text output.

gopls answers in free text; only two line shapes matter here:

    /src/app/main.go:10:6-9: defined here as func Foo()
    caller[0]: ranges 14:2-5 in /src/app/main.go from/to function main in /src/app/main.go:20:6-10

Everything else the oracle prints is ignored.
"""

import re
from typing import Iterator, Tuple

from oracle_client import HierarchyError


DEFINITION_PATTERN = re.compile(r"^(.+:) defined here as (func .+)$")
CALLER_PATTERN = re.compile(r"^caller\[\d+\]:.+function .+ in (.+)$")


class NotAFunctionError(HierarchyError):
    """The symbol at a position resolved to something other than a function"""

    def __init__(self, position: str):
        self.position = position
        super().__init__(f"{position} is not a function")


def parse_definition(output: str, position: str) -> Tuple[str, str]:
    """
    Extract (position, signature) from the first line of a definition query.

    Args:
        output: Raw text returned by the definition query.
        position: The queried position, used for the error message.

    Returns:
        The canonical position prefix (trailing colon included) and the
        function signature text.

    Raises:
        NotAFunctionError: If the first line does not describe a function.
    """
    lines = output.splitlines()
    definition_line = lines[0] if lines else ""

    match = DEFINITION_PATTERN.match(definition_line)
    if match is None:
        raise NotAFunctionError(position)

    return match.group(1), match.group(2)


def iter_caller_positions(output: str) -> Iterator[str]:
    """Yield caller positions from call_hierarchy output in emitted order"""
    for line in output.splitlines():
        match = CALLER_PATTERN.match(line)
        if match is None:
            continue
        yield match.group(1)
