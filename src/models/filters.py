"""Filter specification for listing searches and its URL query encoding."""

import math
from typing import Any, Mapping, Optional
from urllib.parse import urlencode
from pydantic import BaseModel, Field

from src.models.property import PropertyType


# Field name -> URL query parameter. The listing pages use snake_case keys.
QUERY_PARAMS: dict[str, str] = {
    "city": "city",
    "min_price": "min_price",
    "max_price": "max_price",
    "property_type": "property_type",
    "min_bed": "min_bed",
    "max_bed": "max_bed",
    "min_bath": "min_bath",
    "max_bath": "max_bath",
    "min_area": "min_area",
    "max_area": "max_area",
}

_INT_FIELDS = ("min_bed", "max_bed", "min_bath", "max_bath")
_FLOAT_FIELDS = ("min_price", "max_price", "min_area", "max_area")


def _first(value: Any) -> Any:
    """parse_qs style mappings carry lists; only the first value counts."""
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def _parse_positive(raw: Any, integer: bool) -> Optional[float]:
    """Numeric query value, or None when empty, zero, negative or unparsable."""
    if raw is None:
        return None
    try:
        number = float(str(raw).strip())
    except ValueError:
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    if integer:
        if not number.is_integer():
            return None
        return int(number)
    return number


def _format_number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class FilterSpec(BaseModel):
    """All-optional search constraints; an unset field means no constraint."""
    city: Optional[str] = Field(None, description="Exact city match")
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    property_type: Optional[list[PropertyType]] = Field(
        None,
        description="Allowed property types; the URL encoding only carries the first"
    )
    min_bed: Optional[int] = None
    max_bed: Optional[int] = None
    min_bath: Optional[int] = None
    max_bath: Optional[int] = None
    min_area: Optional[float] = None
    max_area: Optional[float] = None

    def is_empty(self) -> bool:
        for name in QUERY_PARAMS:
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, list) and not value:
                continue
            return False
        return True

    @classmethod
    def from_query_params(cls, params: Mapping[str, Any]) -> "FilterSpec":
        """Decode listing-page query parameters. Invalid values are ignored, not rejected."""
        values: dict[str, Any] = {}

        city = _first(params.get(QUERY_PARAMS["city"]))
        if city and str(city).strip():
            values["city"] = str(city).strip()

        for name in _FLOAT_FIELDS + _INT_FIELDS:
            parsed = _parse_positive(_first(params.get(QUERY_PARAMS[name])), integer=name in _INT_FIELDS)
            if parsed is not None:
                values[name] = parsed

        raw_type = _first(params.get(QUERY_PARAMS["property_type"]))
        if raw_type:
            try:
                values["property_type"] = [PropertyType(str(raw_type).strip().lower())]
            except ValueError:
                pass

        return cls(**values)

    def to_query_params(self) -> dict[str, str]:
        """Encode set fields as query parameters (first property type only)."""
        params: dict[str, str] = {}
        if self.city:
            params[QUERY_PARAMS["city"]] = self.city
        for name in ("min_price", "max_price"):
            value = getattr(self, name)
            if value:
                params[QUERY_PARAMS[name]] = _format_number(value)
        if self.property_type:
            params[QUERY_PARAMS["property_type"]] = self.property_type[0].value
        for name in ("min_bed", "max_bed", "min_bath", "max_bath", "min_area", "max_area"):
            value = getattr(self, name)
            if value:
                params[QUERY_PARAMS[name]] = _format_number(value)
        return params

    def to_query_string(self) -> str:
        return urlencode(self.to_query_params())
