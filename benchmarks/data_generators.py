"""
Payload generators for jsoner benchmarks.

Each generator returns a Python value shaped like something a settings
store or message log would persist; `generate_test_data` also renders it
as compact JSON text.
"""

import json
import random
import string
from typing import Any

_ESCAPE_PROBABILITY = 0.3

PAYLOAD_KINDS = ("settings", "records", "escaped_strings", "nested")


def generate_test_value(kind: str, seed: int = 1234) -> Any:
    """Builds the payload `kind` deterministically from `seed`."""
    generators = {
        "settings": _generate_settings,
        "records": _generate_records,
        "escaped_strings": _generate_escaped_strings,
        "nested": _generate_nested,
    }
    if kind not in generators:
        raise ValueError(f"Unknown payload kind: {kind}")
    return generators[kind](random.Random(seed))


def generate_test_data(kind: str, seed: int = 1234) -> str:
    return json.dumps(generate_test_value(kind, seed), separators=(",", ":"))


def _generate_settings(rng: random.Random) -> dict[str, Any]:
    """A flat-ish settings document with a few sections."""
    return {
        f"section_{s}": {
            "enabled": rng.choice([True, False]),
            "label": _random_string(rng, 12),
            "retries": rng.randint(0, 10),
            "timeout": round(rng.uniform(0.5, 30.0), 3),
            "tags": [_random_string(rng, 6) for _ in range(rng.randint(0, 5))],
            "owner": None,
        }
        for s in range(40)
    }


def _generate_records(rng: random.Random) -> list[Any]:
    """A log of uniform records."""
    return [
        {
            "id": f"msg_{i:06d}",
            "sequence": i,
            "score": round(rng.uniform(-100.0, 100.0), 4),
            "channel": rng.choice(["alpha", "beta", "gamma"]),
            "acknowledged": rng.choice([True, False]),
        }
        for i in range(300)
    ]


def _generate_escaped_strings(rng: random.Random) -> dict[str, Any]:
    """Strings dense with characters that need escaping on output."""

    def escaped() -> str:
        chars = []
        for _ in range(60):
            if rng.random() < _ESCAPE_PROBABILITY:
                chars.append(rng.choice(['"', "\\", "/", "\b", "\f", "\n", "\r", "\t", "\x01", "\u2028"]))
            else:
                chars.append(rng.choice(string.ascii_letters + string.digits + " "))
        return "".join(chars)

    return {
        "lines": [escaped() for _ in range(100)],
        "paths": {f"key_{i}": f"C:\\Users\\{_random_string(rng, 8)}\\file_{i}.txt" for i in range(20)},
    }


def _generate_nested(rng: random.Random) -> dict[str, Any]:
    """A tree six levels deep with a small fan-out."""

    def node(depth: int) -> dict[str, Any]:
        if depth <= 0:
            return {"value": _random_string(rng, 10)}
        return {
            "level": depth,
            "items": [node(depth - 1) for _ in range(3)],
            "next": [node(depth - 1)],
        }

    return node(6)


def _random_string(rng: random.Random, length: int) -> str:
    return "".join(rng.choices(string.ascii_letters, k=length))
