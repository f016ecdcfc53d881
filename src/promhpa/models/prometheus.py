# src/promhpa/models/prometheus.py
"""
Pydantic models for Prometheus instant query results.

The API answers with one of four result types. They are modelled as a
tagged union discriminated by `result_type` so callers narrow the result
with an explicit check instead of assuming its shape.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Union

from pydantic import BaseModel, Field
from typing_extensions import Annotated, Literal


def to_datetime(ts: Any) -> datetime:
    """Convert a Prometheus unix timestamp (seconds, possibly fractional) to an aware UTC datetime."""
    return datetime.fromtimestamp(float(ts), tz=timezone.utc)


class Sample(BaseModel):
    """One element of an instant vector."""

    labels: Dict[str, str] = Field(default_factory=dict)
    value: float
    timestamp: datetime


class Point(BaseModel):
    value: float
    timestamp: datetime


class Series(BaseModel):
    """One series of a range vector."""

    labels: Dict[str, str] = Field(default_factory=dict)
    points: List[Point] = Field(default_factory=list)


class VectorResult(BaseModel):
    result_type: Literal["vector"] = "vector"
    samples: List[Sample] = Field(default_factory=list)


class MatrixResult(BaseModel):
    result_type: Literal["matrix"] = "matrix"
    series: List[Series] = Field(default_factory=list)


class ScalarResult(BaseModel):
    result_type: Literal["scalar"] = "scalar"
    value: float
    timestamp: datetime


class StringResult(BaseModel):
    result_type: Literal["string"] = "string"
    value: str
    timestamp: datetime


QueryResult = Annotated[
    Union[VectorResult, MatrixResult, ScalarResult, StringResult],
    Field(discriminator="result_type"),
]


def _point(pair: List[Any], cast=float) -> Dict[str, Any]:
    # Prometheus encodes sample values as strings, including "NaN" and "+Inf".
    ts, value = pair
    return {"timestamp": to_datetime(ts), "value": cast(value)}


def _items(result: Any) -> List[Dict[str, Any]]:
    """The per-series objects of a vector or matrix result."""
    items = result or []
    if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
        raise ValueError(f"expected a list of series objects, got {result!r}")
    return items


def parse_query_result(data: Dict[str, Any]) -> QueryResult:
    """
    Build a QueryResult from the `data` member of a Prometheus response.

    Raises ValueError (or pydantic's ValidationError, a subclass) when the
    payload is malformed or the result type is unknown.
    """
    if not isinstance(data, dict):
        raise ValueError(f"expected an object as query data, got {type(data).__name__}")
    result_type = data.get("resultType")
    result = data.get("result")

    if result_type == "vector":
        return VectorResult(
            samples=[Sample(labels=item.get("metric", {}), **_point(item["value"])) for item in _items(result)]
        )
    if result_type == "matrix":
        return MatrixResult(
            series=[
                Series(labels=item.get("metric", {}), points=[Point(**_point(v)) for v in item.get("values", [])])
                for item in _items(result)
            ]
        )
    if result_type == "scalar":
        return ScalarResult(**_point(result))
    if result_type == "string":
        return StringResult(**_point(result, cast=str))
    raise ValueError(f"unknown Prometheus result type: {result_type!r}")
