"""
Benchmark suite for jsoner.

Compares deserialization and serialization speed, plus peak parse memory,
against the standard library json, orjson and ujson.
"""
