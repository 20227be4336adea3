"""
RoomForge - Map Composition Errors

Domain failures raised by the services. Each carries a stable `kind` and the
HTTP status the API layer answers with.
"""
from typing import Optional


class MapCompositionError(RuntimeError):
    """Base class for every failure surfaced by the composition services."""
    kind = "error"
    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(MapCompositionError):
    kind = "not_found"
    status_code = 404

    def __init__(self, resource: str, resource_id: Optional[object] = None) -> None:
        if resource_id is None:
            message = f"{resource} not found"
        else:
            message = f"{resource} {resource_id} not found"
        super().__init__(message)
        self.resource = resource
        self.resource_id = resource_id


class TemplateNotFoundError(NotFoundError):
    kind = "template_not_found"

    def __init__(self, template_id: int) -> None:
        super().__init__("Template", template_id)


class NotFoundOrAccessDeniedError(MapCompositionError):
    """The row is missing or belongs to someone else; callers cannot tell which."""
    kind = "not_found_or_access_denied"
    status_code = 404

    def __init__(self, resource: str = "Map") -> None:
        super().__init__(f"{resource} not found or access denied")
        self.resource = resource


class OutOfBoundsError(MapCompositionError):
    kind = "out_of_bounds"
    status_code = 400


class CollidesWithElementError(MapCompositionError):
    kind = "collides_with_element"
    status_code = 409

    def __init__(self, map_element_id: Optional[int] = None) -> None:
        super().__init__("Space collides with existing element")
        self.map_element_id = map_element_id


class CollidesWithSpaceError(MapCompositionError):
    kind = "collides_with_space"
    status_code = 409

    def __init__(self, map_space_id: Optional[int] = None) -> None:
        super().__init__("Space collides with existing space")
        self.map_space_id = map_space_id


class ValidationFailedError(MapCompositionError):
    kind = "validation_failed"
    status_code = 422


class CodeGenerationExhaustedError(MapCompositionError):
    """Transient: retrying the whole operation is safe."""
    kind = "code_generation_exhausted"
    status_code = 503

    def __init__(self, attempts: int) -> None:
        super().__init__(f"Could not generate a unique access code after {attempts} attempts")
        self.attempts = attempts


class TransactionFailedError(MapCompositionError):
    kind = "transaction_failed"
    status_code = 500

    def __init__(self, detail: str = "") -> None:
        super().__init__("Transaction failed and was rolled back")
        self.detail = detail
