from surfacemark.schemas.schemas import (
    RenderRequestBody,
    RenderResponse,
    HealthResponse,
)

__all__ = [
    "RenderRequestBody",
    "RenderResponse",
    "HealthResponse",
]
