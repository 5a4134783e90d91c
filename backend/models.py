"""
Data models for the Wirt API gateway
"""
from ipaddress import IPv4Address
from typing import List

from pydantic import BaseModel, Field


class UpdateRequest(BaseModel):
    message: str
    signature: str


class ErrorMessage(BaseModel):
    code: int
    message: str


class Peer(BaseModel):
    public_key: str
    address: IPv4Address


class Server(BaseModel):
    private_key: str
    port: int = Field(ge=1, le=65535)
    address: IPv4Address


class Payload(BaseModel):
    server: Server
    peers: List[Peer] = []
