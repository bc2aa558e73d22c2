"""Shared type aliases used across wayfinder modules."""

from typing import Any, TypeAlias

# View component: opaque to the router, never inspected or invoked
Component: TypeAlias = Any

# Path params: parameter name -> decoded string value
Params: TypeAlias = dict[str, str]

# Query value: scalar, bare key (None), or repeated key
QueryValue: TypeAlias = str | list[str | None] | None

# Parsed query object
Query: TypeAlias = dict[str, QueryValue]
