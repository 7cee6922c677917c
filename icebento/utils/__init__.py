from .errors import (
    ErrorCode,
    SIAError,
    ShapeMismatch,
    MissingField,
    InvalidParameter
)
from .masks import EdgeMask, is_dynamic_ice
from .config import SIAConfig
from .mesh_geometry import MeshGeometry, layer_center_sigma_from_fractions
from .field_store import FieldStore, StateSnapshot
from .logging_config import setup_logging

__all__ = [
    "ErrorCode",
    "SIAError",
    "ShapeMismatch",
    "MissingField",
    "InvalidParameter",
    "EdgeMask",
    "is_dynamic_ice",
    "SIAConfig",
    "MeshGeometry",
    "layer_center_sigma_from_fractions",
    "FieldStore",
    "StateSnapshot",
    "setup_logging"
]
