"""
JSON specification failure tests.

Validates that malformed documents raise JSONParseError with a problem kind
and position information, and that the lenient wrappers absorb them.
"""

import io

import jsoner
from jsoner import Problem

from .conftest import JsonTestCase


def test_json_spec_failures(json_fail_cases: list[JsonTestCase]) -> None:
    """
    Validates JSON_checker failure documents on the strict stream path.
    """
    for case in json_fail_cases:
        try:
            jsoner.deserialize(io.StringIO(case.input_data))
        except jsoner.JSONParseError as exc:
            assert exc.problem in Problem, case.description
            assert exc.pos >= 0
            assert exc.lineno >= 1
            assert exc.colno >= 1
        else:
            raise AssertionError(f"{case.description} parsed unexpectedly")


def test_lenient_wrappers_absorb_failures(
    json_fail_cases: list[JsonTestCase],
) -> None:
    """
    Validates that typed wrappers return their defaults for every failure.
    """
    array_default: list[object] = []
    object_default: dict[str, object] = {}

    for case in json_fail_cases:
        assert jsoner.deserialize_array(case.input_data, array_default) is array_default
        assert jsoner.deserialize_object(case.input_data, object_default) is object_default


def test_pretty_print_absorbs_lexing_failures(
    json_fail_cases: list[JsonTestCase],
) -> None:
    """
    Validates that lexing failures yield an empty pretty-print result.
    """
    for case in json_fail_cases:
        try:
            jsoner.pretty_print_to(io.StringIO(case.input_data), io.StringIO())
        except jsoner.JSONParseError:
            assert jsoner.pretty_print(case.input_data) == ""


def test_outcome_matches_expectation(
    json_fail_cases: list[JsonTestCase],
    lenient_cases: list[JsonTestCase],
    json_pass_cases: list[JsonTestCase],
) -> None:
    """
    Validates that exactly the cases marked should_fail raise.
    """
    for case in [*json_fail_cases, *lenient_cases, *json_pass_cases]:
        try:
            jsoner.deserialize(io.StringIO(case.input_data))
        except jsoner.JSONParseError:
            failed = True
        else:
            failed = False
        assert failed == case.should_fail, case.description
