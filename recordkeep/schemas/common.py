"""
Response bodies shared by several routers.
"""

from pydantic import BaseModel


class SuccessResponse(BaseModel):
    """Acknowledgement for operations that return no resource."""

    message: str


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
