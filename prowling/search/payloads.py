"""Shape guards for Prowlarr JSON payloads."""

from __future__ import annotations


def expect_dict(value: object, context: str) -> dict:
    if isinstance(value, dict):
        return value
    value_type = type(value).__name__
    raise ValueError(f"{context} has unexpected type '{value_type}'")


def expect_list(value: object, context: str) -> list:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    value_type = type(value).__name__
    raise ValueError(f"{context} has unexpected type '{value_type}'")


def expect_list_of_dicts(value: object, context: str) -> list[dict]:
    output: list[dict] = []
    for idx, item in enumerate(expect_list(value, context)):
        output.append(expect_dict(item, f"{context}[{idx}]"))
    return output
