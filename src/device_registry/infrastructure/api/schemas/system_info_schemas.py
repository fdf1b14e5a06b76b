"""Pydantic schemas for system info operations."""

from pydantic import BaseModel


class NetworkInfoRequest(BaseModel):
    """Network identity a device reports."""

    local_ipv4: str
    mac: str
    hostname: str


class NetworkInfoResponse(BaseModel):
    """Network identity; all empty strings when none was reported."""

    local_ipv4: str = ""
    mac: str = ""
    hostname: str = ""
