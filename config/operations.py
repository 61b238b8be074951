"""
Bulk operation catalog.

This table is loaded once at startup by ``OperationCatalog.from_config()``.
Each row describes one operation kind:

- kind: operation identifier (must match ``OperationKind``)
- label / description: human-readable text for the action menu
- batch_size: max items processed concurrently per wave
- estimated_cost_ms: per-item time estimate, only used for ETA display
- requires_input / input_shape: what the caller must supply
- input_field: key holding the single value for select/text inputs
- input_options: allowed values for select inputs
- undoable: successful items produce an undo patch
- destructive: advisory flag, callers should confirm before running

Integrators can replace this table; there is no runtime registration API.
"""

from typing import Any, Dict, List

# Growth stages offered by the stage update operation
STAGE_OPTIONS = ["seedling", "vegetative", "pre-flower", "flowering", "harvest"]

# Plant statuses offered by the status update operation
STATUS_OPTIONS = ["healthy", "flowering", "issues", "harvested"]

DEFAULT_OPERATIONS: List[Dict[str, Any]] = [
    {
        "kind": "update_stage",
        "label": "Update Growth Stage",
        "description": "Transition selected plants to a new growth stage",
        "requires_input": True,
        "input_shape": "select",
        "input_field": "stage",
        "input_options": STAGE_OPTIONS,
        "batch_size": 10,
        "estimated_cost_ms": 2000,
        "undoable": True,
    },
    {
        "kind": "update_status",
        "label": "Update Status",
        "description": "Update the status of selected plants",
        "requires_input": True,
        "input_shape": "select",
        "input_field": "status",
        "input_options": STATUS_OPTIONS,
        "batch_size": 20,
        "estimated_cost_ms": 1000,
        "undoable": True,
    },
    {
        "kind": "update_location",
        "label": "Update Location",
        "description": "Move selected plants to a new location",
        "requires_input": True,
        "input_shape": "text",
        "input_field": "location",
        "placeholder": "Enter new location (e.g., Tent A, Room 2)",
        "batch_size": 15,
        "estimated_cost_ms": 1500,
        "undoable": True,
    },
    {
        "kind": "add_notes",
        "label": "Add Notes",
        "description": "Add the same note to all selected plants",
        "requires_input": True,
        "input_shape": "textarea",
        "input_field": "note",
        "placeholder": "Enter notes to add to all selected plants",
        "batch_size": 10,
        "estimated_cost_ms": 2000,
        "undoable": False,
    },
    {
        "kind": "record_metrics",
        "label": "Record Metrics",
        "description": "Record growth metrics for selected plants",
        "requires_input": True,
        "input_shape": "metrics",
        "batch_size": 5,
        "estimated_cost_ms": 3000,
        "undoable": False,
    },
    {
        "kind": "delete",
        "label": "Delete Plants",
        "description": "Permanently delete selected plants",
        "requires_input": False,
        "batch_size": 5,
        "estimated_cost_ms": 2000,
        "undoable": True,
        "destructive": True,
    },
    {
        "kind": "clone",
        "label": "Create Clones",
        "description": "Create clones from selected plants",
        "requires_input": True,
        "input_shape": "clone_config",
        "batch_size": 3,
        "estimated_cost_ms": 5000,
        "undoable": False,
    },
    {
        "kind": "harvest",
        "label": "Harvest Plants",
        "description": "Record harvest data for selected plants",
        "requires_input": True,
        "input_shape": "harvest_data",
        "batch_size": 5,
        "estimated_cost_ms": 4000,
        "undoable": False,
    },
    {
        "kind": "feed",
        "label": "Feed Plants",
        "description": "Log a feeding for selected plants",
        "requires_input": False,
        "input_shape": "care",
        "batch_size": 20,
        "estimated_cost_ms": 1000,
        "undoable": False,
    },
    {
        "kind": "water",
        "label": "Water Plants",
        "description": "Log a watering for selected plants",
        "requires_input": False,
        "input_shape": "care",
        "batch_size": 20,
        "estimated_cost_ms": 1000,
        "undoable": False,
    },
]
