"""
Input validation for bulk operations.

Each input shape has a pydantic model; ``validate_input`` returns the
normalised payload the effect functions expect, or raises ValidationError
before any batch starts.
"""

from typing import Any, Dict, Literal, Mapping, Optional
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from ..models.operation import InputShape, OperationDescriptor
from .exceptions import ValidationError

DEFAULT_NAMING_PATTERN = "{parent} Clone {number}"
MAX_CLONES_PER_PLANT = 5


def _strip_required(v: Optional[str]) -> str:
    if v is None or not str(v).strip():
        raise ValueError("must not be empty")
    return str(v).strip()


class TextInput(BaseModel):
    value: str = Field(..., max_length=200)

    @field_validator("value", mode="before")
    @classmethod
    def strip_value(cls, v):
        return _strip_required(v)


class NoteInput(BaseModel):
    note: str = Field(..., max_length=5000)
    author: Optional[str] = Field(None, max_length=100)

    @field_validator("note", mode="before")
    @classmethod
    def strip_note(cls, v):
        return _strip_required(v)


class MetricsInput(BaseModel):
    height: Optional[float] = Field(None, ge=0)  # cm
    width: Optional[float] = Field(None, ge=0)   # cm
    node_count: Optional[int] = Field(None, ge=0)
    branch_count: Optional[int] = Field(None, ge=0)

    @model_validator(mode="after")
    def at_least_one(self):
        if all(v is None for v in (self.height, self.width, self.node_count, self.branch_count)):
            raise ValueError("at least one metric is required")
        return self


class CloneConfig(BaseModel):
    clone_count: int = Field(..., ge=1, le=MAX_CLONES_PER_PLANT)
    naming_pattern: str = Field(DEFAULT_NAMING_PATTERN, min_length=1, max_length=200)


class HarvestData(BaseModel):
    weight: float = Field(..., gt=0)  # grams
    quality: Optional[Literal["poor", "fair", "good", "excellent", "premium"]] = None
    notes: str = Field("", max_length=5000)


class CareInput(BaseModel):
    amount_ml: Optional[float] = Field(None, ge=0)
    nutrients: Optional[str] = Field(None, max_length=200)
    notes: str = Field("", max_length=5000)


def validate_input(descriptor: OperationDescriptor, input_data: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Validate and normalise input for ``descriptor``.

    Args:
        descriptor: Operation being run
        input_data: Raw caller input (may be None for operations without input)

    Returns:
        Normalised input dict

    Raises:
        ValidationError: If required input is missing or invalid
    """
    data = dict(input_data or {})
    shape = descriptor.input_shape
    op = descriptor.kind.value

    if shape == InputShape.NONE:
        return data
    if not descriptor.requires_input and not data:
        return {}

    try:
        if shape == InputShape.SELECT:
            value = data.get(descriptor.input_field)
            if value not in descriptor.input_options:
                raise ValidationError(
                    f"{op}: '{descriptor.input_field}' must be one of "
                    f"{', '.join(descriptor.input_options)} (got {value!r})"
                )
            return {descriptor.input_field: value, "notes": str(data.get("notes") or "")}

        if shape == InputShape.TEXT:
            text = TextInput(value=data.get(descriptor.input_field))
            return {descriptor.input_field: text.value}

        if shape == InputShape.TEXTAREA:
            return NoteInput(**data).model_dump()

        if shape == InputShape.METRICS:
            raw = data.get("metrics", data)
            metrics = MetricsInput(**raw)
            return {"metrics": metrics.model_dump(exclude_none=True)}

        if shape == InputShape.CLONE_CONFIG:
            return CloneConfig(**data).model_dump()

        if shape == InputShape.HARVEST_DATA:
            return HarvestData(**data).model_dump()

        if shape == InputShape.CARE:
            return CareInput(**data).model_dump(exclude_none=True)

    except PydanticValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'input'}: {err['msg']}"
            for err in e.errors()
        )
        raise ValidationError(f"{op}: invalid input ({errors})") from e
    except TypeError as e:
        raise ValidationError(f"{op}: invalid input ({e})") from e

    raise ValidationError(f"{op}: unsupported input shape {shape.value}")
