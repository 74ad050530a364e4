#!/usr/bin/env python3
"""
Call Hierarchy Builder

Builds the tree of a function and, recursively, all of its callers by driving
an oracle (gopls) with "definition" and "call_hierarchy" queries.

Features:
- Depth-first discovery in the order the oracle lists callers
- Per-node failure isolation: a failed lookup becomes an error node in place
  instead of aborting the whole traversal
- Optional guard against cycles on the current recursion path

Usage:
    from oracle_client import GoplsOracle
    from hierarchy_builder import HierarchyBuilder

    root = HierarchyBuilder(GoplsOracle()).build("main.go:10:6")
"""

from dataclasses import dataclass, field
from typing import List, Set

from loguru import logger

from oracle_client import HierarchyError, Oracle
from oracle_parsers import iter_caller_positions, parse_definition


ERROR_POSITION = "Error"


@dataclass
class Function:
    """A function in the hierarchy together with the functions that call it"""

    name: str
    position: str
    called_by: List["Function"] = field(default_factory=list)

    @classmethod
    def error(cls, message: str) -> "Function":
        """Error node standing in for a lookup that failed"""
        return cls(name=message, position=ERROR_POSITION)

    @property
    def is_error(self) -> bool:
        return self.position == ERROR_POSITION


@dataclass
class HierarchySummary:
    """Counts gathered over a built hierarchy"""

    functions: int = 0
    errors: int = 0
    max_depth: int = 0


class HierarchyBuilder:
    """Resolves a root function and recursively attaches its callers"""

    def __init__(self, oracle: Oracle, cycle_guard: bool = True):
        self.oracle = oracle
        self.cycle_guard = cycle_guard
        # positions from the root down to the node currently being expanded
        self._path: Set[str] = set()

    def build(self, position: str) -> Function:
        """
        Build the complete caller hierarchy for the function at position.

        Raises:
            HierarchyError: If the root itself cannot be resolved to a function.
        """
        root = self.resolve_definition(position)
        logger.debug(f"🌱 Root function {root.name} at {root.position}")
        self.expand_callers(root)
        return root

    def resolve_definition(self, position: str) -> Function:
        """Look up the function enclosing position; errors propagate unchanged"""
        output = self.oracle.definition(position)
        definition_position, signature = parse_definition(output, position)
        return Function(name=signature, position=definition_position)

    def expand_callers(self, node: Function):
        """
        Attach every caller of node, depth-first.

        Failures never propagate out of here. A failed call_hierarchy query or a
        caller that cannot be resolved adds one error node to node.called_by and
        stops the expansion of node; other branches are unaffected.
        """
        try:
            output = self.oracle.call_hierarchy(node.position)
        except HierarchyError as e:
            self._attach_error(node, e)
            return

        self._path.add(node.position)
        try:
            for caller_position in iter_caller_positions(output):
                try:
                    caller = self.resolve_definition(caller_position)
                except HierarchyError as e:
                    self._attach_error(node, e)
                    return

                logger.debug(f"📞 {caller.name} calls {node.name}")
                node.called_by.append(caller)

                if self.cycle_guard and caller.position in self._path:
                    logger.debug(f"🔁 Cycle through {caller.position}, not expanding")
                    continue

                self.expand_callers(caller)
        finally:
            self._path.discard(node.position)

    def _attach_error(self, node: Function, error: HierarchyError):
        logger.warning(f"⚠️ Callers of {node.position} incomplete: {error}")
        node.called_by.append(Function.error(str(error)))


def summarize(root: Function) -> HierarchySummary:
    """Count functions, error nodes and the deepest caller chain"""
    summary = HierarchySummary()
    stack = [(root, 0)]

    while stack:
        node, depth = stack.pop()
        if node.is_error:
            summary.errors += 1
        else:
            summary.functions += 1
        summary.max_depth = max(summary.max_depth, depth)
        stack.extend((caller, depth + 1) for caller in node.called_by)

    return summary

