"""
cityweaver.api.serializers

JSON conversion for domain values and concern snapshots.
"""

from __future__ import annotations

import dataclasses
import enum
from collections.abc import Mapping
from typing import Any

from cityweaver.domain.models import DistanceMatrixResult


def to_jsonable(value: Any) -> Any:
    if isinstance(value, DistanceMatrixResult):
        # Tuple-keyed cells are not JSON; emit them as rows instead.
        return {
            "origin_count": value.origin_count,
            "destination_count": value.destination_count,
            "origin_addresses": list(value.origin_addresses),
            "destination_addresses": list(value.destination_addresses),
            "rows": [
                [to_jsonable(c) for c in value.row(i)] for i in range(value.origin_count)
            ],
        }
    if isinstance(value, enum.Enum):
        return value.value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Mapping):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value
