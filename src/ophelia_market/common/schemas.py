"""Shared Pydantic schemas for Ophelia Market."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    service: str = "ophelia-market"


class ErrorResponse(BaseModel):
    """Error body returned by the browser-facing content functions."""

    error: str
