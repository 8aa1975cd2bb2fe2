"""
Pytest configuration and shared fixtures for jsoner tests.

Provides immutable test case data for the grammar, the lexer and the
serializer so individual test modules stay short.
"""

import io
from dataclasses import dataclass
from typing import Any

import pytest


@dataclass(frozen=True)
class JsonTestCase:
    """
    Immutable container for JSON test case data.

    Holds test input and expected behavior for consistent test execution.
    """

    description: str
    input_data: str
    should_fail: bool = False
    expected_output: Any = None


class TrickleReader(io.StringIO):
    """Hands out at most one character per read() call."""

    def read(self, size: int | None = -1) -> str:
        return super().read(1)


@pytest.fixture
def json_fail_cases() -> list[JsonTestCase]:
    """
    JSON_checker failure documents this grammar rejects.

    The numbering follows https://json.org/JSON_checker/test/failN.json.
    """
    fail_docs = {
        2: '["Unclosed array"',
        3: '{unquoted_key: "keys must be quoted"}',
        7: '["Comma after the close"],',
        8: '["Extra close"]]',
        10: '{"Extra value after close": true} "misplaced quoted value"',
        11: '{"Illegal expression": 1 + 2}',
        12: '{"Illegal invocation": alert()}',
        13: '{"Numbers cannot have leading zeroes": 013}',
        14: '{"Numbers cannot be hex": 0x14}',
        15: '["Illegal backslash escape: \\x15"]',
        16: "[\\naked]",
        17: '["Illegal backslash escape: \\017"]',
        21: '{"Comma instead of colon", null}',
        22: '["Colon instead of comma": false]',
        23: '["Bad value", truth]',
        24: "['single quote']",
        26: '["tab\\   character\\   in\\  string\\  "]',
        28: '["line\\\nbreak"]',
        29: "[0e]",
        30: "[0e+]",
        31: "[0e+-1]",
        32: '{"Comma instead if closing brace": true,',
        33: '["mismatch"}',
    }

    return [
        JsonTestCase(
            description=f"fail{number}.json",
            input_data=doc,
            should_fail=True,
        )
        for number, doc in fail_docs.items()
    ]


@pytest.fixture
def lenient_cases() -> list[JsonTestCase]:
    """
    JSON_checker failure documents this grammar accepts.

    Separators are optional and raw control characters may appear inside
    strings, so these parse to the values shown.
    """
    return [
        JsonTestCase("fail1.json", '"A JSON payload should be an object or array, not a string."', False, "A JSON payload should be an object or array, not a string."),
        JsonTestCase("fail4.json", '["extra comma",]', False, ["extra comma"]),
        JsonTestCase("fail5.json", '["double extra comma",,]', False, ["double extra comma"]),
        JsonTestCase("fail6.json", '[   , "<-- missing value"]', False, ["<-- missing value"]),
        JsonTestCase("fail9.json", '{"Extra comma": true,}', False, {"Extra comma": True}),
        JsonTestCase("fail18.json", '[[[[[[[[[[[[[[[[[[[["Too deep"]]]]]]]]]]]]]]]]]]]]', False, None),
        JsonTestCase("fail19.json", '{"Missing colon" null}', False, {"Missing colon": None}),
        JsonTestCase("fail20.json", '{"Double colon":: null}', False, {"Double colon": None}),
        JsonTestCase("fail25.json", '["\ttab\tcharacter\tin\tstring\t"]', False, ["\ttab\tcharacter\tin\tstring\t"]),
        JsonTestCase("fail27.json", '["line\nbreak"]', False, ["line\nbreak"]),
    ]


@pytest.fixture
def json_pass_cases() -> list[JsonTestCase]:
    """
    Provides JSON strings that must parse successfully per JSON specification.
    """
    return [
        JsonTestCase(
            description="pass1.json - complex nested structure",
            input_data="""[
    "JSON Test Pattern pass1",
    {"object with 1 member":["array with 1 element"]},
    {},
    [],
    -42,
    true,
    false,
    null,
    {
        "integer": 1234567890,
        "real": -9876.543210,
        "e": 0.123456789e-12,
        "E": 1.234567890E+34,
        "":  23456789012E66,
        "zero": 0,
        "one": 1,
        "space": " ",
        "quote": "\\"",
        "backslash": "\\\\",
        "controls": "\\b\\f\\n\\r\\t",
        "slash": "/ & \\/",
        "alpha": "abcdefghijklmnopqrstuvwyz",
        "ALPHA": "ABCDEFGHIJKLMNOPQRSTUVWYZ",
        "digit": "0123456789",
        "0123456789": "digit",
        "special": "`1~!@#$%^&*()_+-={':[,]}|;.</>?",
        "hex": "\\u0123\\u4567\\u89AB\\uCDEF\\uabcd\\uef4A",
        "true": true,
        "false": false,
        "null": null,
        "array":[  ],
        "object":{  },
        "address": "50 St. James Street",
        "url": "https://www.JSON.org/",
        "comment": "// /* <!-- --",
        "# -- --> */": " ",
        " s p a c e d " :[1,2 , 3

,

4 , 5        ,          6           ,7        ],"compact":[1,2,3,4,5,6,7],
        "jsontext": "{\\"object with 1 member\\":[\\"array with 1 element\\"]}"
    }
]""",
        ),
        JsonTestCase(
            description="pass2.json - deep nesting",
            input_data='[[[[[[[[[[[[[[[[[[["Not too deep"]]]]]]]]]]]]]]]]]]]',
        ),
        JsonTestCase(
            description="pass3.json - simple object",
            input_data='{"JSON Test Pattern pass3": {"The outermost value": "must be an object or array.", "In this test": "It is an object."}}',
        ),
    ]


@pytest.fixture
def basic_json_values() -> list[JsonTestCase]:
    """
    Covers every scalar kind and the basic container shapes.
    """
    return [
        JsonTestCase("null value", "null", False, None),
        JsonTestCase("true boolean", "true", False, True),
        JsonTestCase("false boolean", "false", False, False),
        JsonTestCase("integer", "42", False, 42),
        JsonTestCase("negative integer", "-17", False, -17),
        JsonTestCase("zero", "0", False, 0),
        JsonTestCase("float", "3.14", False, 3.14),
        JsonTestCase("exponent", "1.5e10", False, 1.5e10),
        JsonTestCase("negative exponent", "-2E-3", False, -0.002),
        JsonTestCase("empty string", '""', False, ""),
        JsonTestCase("simple string", '"hello"', False, "hello"),
        JsonTestCase("empty array", "[]", False, []),
        JsonTestCase("empty object", "{}", False, {}),
        JsonTestCase("simple array", "[1, 2, 3]", False, [1, 2, 3]),
        JsonTestCase(
            "simple object", '{"key": "value"}', False, {"key": "value"}
        ),
    ]
