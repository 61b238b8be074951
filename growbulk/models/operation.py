"""Operation catalog data model."""

from enum import Enum
from typing import Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, model_validator


class OperationKind(str, Enum):
    """Bulk operation identifiers."""
    UPDATE_STAGE = "update_stage"
    UPDATE_STATUS = "update_status"
    UPDATE_LOCATION = "update_location"
    ADD_NOTES = "add_notes"
    RECORD_METRICS = "record_metrics"
    DELETE = "delete"
    CLONE = "clone"
    HARVEST = "harvest"
    FEED = "feed"
    WATER = "water"


class InputShape(str, Enum):
    """What validated input looks like for an operation."""
    NONE = "none"
    SELECT = "select"              # one value from input_options
    TEXT = "text"                  # short free text
    TEXTAREA = "textarea"          # long free text
    METRICS = "metrics"            # structured growth metrics
    CLONE_CONFIG = "clone_config"  # clone count + naming pattern
    HARVEST_DATA = "harvest_data"  # weight, quality, notes
    CARE = "care"                  # optional feeding/watering details


class OperationDescriptor(BaseModel):
    """Immutable configuration record for one operation kind."""

    model_config = ConfigDict(frozen=True)

    kind: OperationKind
    label: str = ""
    description: str = ""
    batch_size: int = Field(..., gt=0)
    estimated_cost_ms: float = Field(..., gt=0)
    requires_input: bool = False
    input_shape: InputShape = InputShape.NONE
    input_field: Optional[str] = None
    input_options: Tuple[str, ...] = ()
    placeholder: Optional[str] = None
    undoable: bool = False
    destructive: bool = False

    @model_validator(mode="after")
    def check_input_contract(self):
        if self.input_shape == InputShape.SELECT and not self.input_options:
            raise ValueError(f"{self.kind.value}: select input needs input_options")
        if self.input_shape in (InputShape.SELECT, InputShape.TEXT) and not self.input_field:
            raise ValueError(f"{self.kind.value}: {self.input_shape.value} input needs input_field")
        if self.requires_input and self.input_shape == InputShape.NONE:
            raise ValueError(f"{self.kind.value}: requires_input set but no input_shape")
        return self
