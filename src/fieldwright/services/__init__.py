"""Service layer — form-level validation, rendering, and storage.

Services operate on a FieldRegistry and return plain values or
ServiceResult. They must never import from commands or output.
"""

from fieldwright.services.renderer import FieldRenderer
from fieldwright.services.result import ServiceError, ServiceResult
from fieldwright.services.storage import FieldStorage
from fieldwright.services.validator import FieldValidator

__all__ = ["FieldRenderer", "FieldStorage", "FieldValidator", "ServiceError", "ServiceResult"]
