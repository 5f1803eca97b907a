"""DTOs HTTP (pydantic) por bounded context."""
