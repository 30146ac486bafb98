"""
Jerarquía de errores del dominio.

Cada error lleva un status_code para que la capa web lo traduzca
directamente a una respuesta HTTP.
"""

from typing import Any, Optional


class HabitarError(Exception):
    """Error base de la aplicación."""

    status_code: int = 500

    def __init__(
        self,
        message: str = "Ocurrió un error",
        status_code: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class PersistenceError(HabitarError):
    """El backend rechazó una lectura o escritura."""

    status_code = 502

    def __init__(self, operation: str, table: str, cause: Optional[str] = None):
        super().__init__(
            message=f"Falló {operation} en {table}",
            details={"operation": operation, "table": table, "cause": cause},
        )
        self.operation = operation
        self.table = table


class ValidationError(HabitarError):
    """Error de validación de formulario, previo a cualquier escritura."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None, errors: Optional[dict] = None):
        details: dict[str, Any] = {}
        if field:
            details["field"] = field
        if errors:
            details["errors"] = errors
        super().__init__(message=message, details=details)
        self.field = field

    @classmethod
    def from_pydantic(
        cls, error, message: str = "El formulario tiene errores"
    ) -> "ValidationError":
        """Un mensaje por campo a partir de un pydantic.ValidationError."""
        errors = {
            ".".join(str(part) for part in err["loc"]) or "__root__": err["msg"]
            for err in error.errors()
        }
        return cls(message, errors=errors)


class NotificationDeliveryFailure(HabitarError):
    """El POST al webhook falló. Solo se loguea, nunca llega al usuario."""

    def __init__(self, url: str, cause: str):
        super().__init__(message=f"No se pudo notificar a {url}", details={"cause": cause})
        self.url = url


class InvalidTransition(HabitarError):
    """Transición de estado no permitida para una visita."""

    status_code = 409

    def __init__(self, current: str, requested: str):
        super().__init__(
            message=f"No se puede pasar de '{current}' a '{requested}'",
            details={"current": current, "requested": requested},
        )
        self.current = current
        self.requested = requested


class NotFoundError(HabitarError):
    """Entidad inexistente."""

    status_code = 404

    def __init__(self, entity: str, id: Any):
        super().__init__(
            message=f"{entity} con id {id} no encontrado",
            details={"entity": entity, "id": id},
        )


class PermissionsNotLoaded(HabitarError):
    """Se consultó un permiso antes de cargar la sesión."""

    status_code = 503

    def __init__(self):
        super().__init__(message="Los permisos del usuario todavía se están cargando")
