#!/usr/bin/env python3
"""
Tests for parsing gopls definition and call_hierarchy output
"""

import pytest

from oracle_parsers import NotAFunctionError, iter_caller_positions, parse_definition


CALL_HIERARCHY_OUTPUT = """identifier: function Foo in /src/app/foo.go:10:6-9
caller[0]: ranges 14:2-5 in /src/app/main.go from/to function main in /src/app/main.go:12:6-10
caller[1]: ranges 30:9-12, 31:9-12 in /src/app/worker.go from/to function run in /src/app/worker.go:25:6-9
callee[0]: ranges 11:2-8 in /src/app/foo.go from/to function helper in /src/app/foo.go:40:6-12
caller[2]: ranges 8:3-6 in /src/app/main_test.go from/to function TestFoo in /src/app/main_test.go:7:6-13
"""


def test_parse_definition():
    """Position prefix keeps its trailing colon, signature is taken verbatim"""
    print("🧪 Testing definition line parsing...")

    position, signature = parse_definition(
        "file.go:10:6: defined here as func Foo()\n", "file.go:10:6"
    )

    assert position == "file.go:10:6:", f"Unexpected position '{position}'"
    assert signature == "func Foo()", f"Unexpected signature '{signature}'"
    print("✅ Definition line parsing test passed")


def test_parse_definition_uses_first_line_only():
    output = (
        "/src/app/foo.go:10:6-9: defined here as func (s *Server) Foo(ctx context.Context) error\n"
        "Foo handles requests.\n"
        "other.go:1:1: defined here as func Other()\n"
    )

    position, signature = parse_definition(output, "/src/app/foo.go:10:7")

    assert position == "/src/app/foo.go:10:6-9:"
    assert signature == "func (s *Server) Foo(ctx context.Context) error"


def test_parse_definition_rejects_non_functions():
    print("🧪 Testing non-function definitions...")

    with pytest.raises(NotAFunctionError) as excinfo:
        parse_definition("file.go:3:5: defined here as var counter int\n", "file.go:3:5")

    assert str(excinfo.value) == "file.go:3:5 is not a function"
    assert excinfo.value.position == "file.go:3:5"
    print("✅ Non-function definitions test passed")


def test_parse_definition_rejects_empty_output():
    with pytest.raises(NotAFunctionError):
        parse_definition("", "file.go:1:1")


def test_iter_caller_positions_keeps_order_and_skips_other_lines():
    print("🧪 Testing caller line extraction...")

    positions = list(iter_caller_positions(CALL_HIERARCHY_OUTPUT))

    assert positions == [
        "/src/app/main.go:12:6-10",
        "/src/app/worker.go:25:6-9",
        "/src/app/main_test.go:7:6-13",
    ], f"Unexpected caller positions: {positions}"
    print("✅ Caller line extraction test passed")


def test_iter_caller_positions_without_callers():
    assert list(iter_caller_positions("identifier: function Foo in foo.go:1:6\n")) == []
    assert list(iter_caller_positions("")) == []


if __name__ == "__main__":
    raise SystemExit(pytest.main([__file__, "-v"]))
