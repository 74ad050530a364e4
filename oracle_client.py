#!/usr/bin/env python3
"""
Oracle Client for gopls

Thin synchronous wrapper around the gopls command line. Every query spawns one
gopls process, waits for it to exit and hands back its combined output as text.

Features:
- "definition" and "call_hierarchy" queries
- Combined stdout/stderr capture for diagnostics
- Pluggable oracle interface so the hierarchy builder can run against fakes

Installation:
    go install golang.org/x/tools/gopls@latest

Usage:
    from oracle_client import GoplsOracle

    oracle = GoplsOracle()
    text = oracle.query("definition", "main.go:10:6")
"""

import shutil
import subprocess
from abc import ABC, abstractmethod
from typing import List

from loguru import logger


DEFINITION = "definition"
CALL_HIERARCHY = "call_hierarchy"
QUERY_KINDS = (DEFINITION, CALL_HIERARCHY)


class HierarchyError(Exception):
    """Base class for every failure reported while building a hierarchy"""


class OracleError(HierarchyError):
    """The oracle process could not be run or exited with a failure status"""

    def __init__(self, feature: str, position: str, reason: str, output: str = ""):
        self.feature = feature
        self.position = position
        self.reason = reason
        self.output = output
        super().__init__(f"`gopls {feature}` failed: {reason}: {output}")


class Oracle(ABC):
    """Source analysis service answering definition and call hierarchy queries"""

    @abstractmethod
    def query(self, kind: str, position: str) -> str:
        """Run one query and return its raw text, raising OracleError on failure"""
        pass

    def definition(self, position: str) -> str:
        return self.query(DEFINITION, position)

    def call_hierarchy(self, position: str) -> str:
        return self.query(CALL_HIERARCHY, position)


class GoplsOracle(Oracle):
    """Oracle backed by the gopls binary, one process per query"""

    def __init__(self, gopls_path: str = "gopls"):
        self.gopls_path = gopls_path

    def is_available(self) -> bool:
        """Check whether the configured gopls binary can be found"""
        return shutil.which(self.gopls_path) is not None

    def _command(self, kind: str, position: str) -> List[str]:
        return [self.gopls_path, kind, position]

    def query(self, kind: str, position: str) -> str:
        if kind not in QUERY_KINDS:
            raise ValueError(f"Unknown oracle query kind: {kind}")

        command = self._command(kind, position)
        logger.debug(f"🔍 Running {' '.join(command)}")

        try:
            result = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
            )
        except OSError as e:
            raise OracleError(kind, position, str(e)) from e

        # file paths in gopls output are not guaranteed to be UTF-8
        output = (result.stdout or b"").decode("utf-8", errors="replace")
        if result.returncode != 0:
            logger.debug(f"❌ gopls {kind} exited with status {result.returncode}")
            raise OracleError(
                kind, position, f"exit status {result.returncode}", output
            )

        return output

