"""Abstract base transport for talking to a GS1900 switch."""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType
from typing import Self


class BaseTransport(ABC):
    """Connection to one switch over one protocol (SSH shell or HTTP)."""

    default_port: int = 0

    def __init__(self, host: str, username: str, password: str, port: int | None = None):
        self.host = host
        self.username = username
        self.password = password
        self.port = port or self.default_port

    @abstractmethod
    def connect(self) -> None:
        """Establish the connection and log in."""

    @abstractmethod
    def disconnect(self) -> None:
        """Close the connection. Safe to call when not connected."""

    @abstractmethod
    def is_connected(self) -> bool:
        """Check if transport is currently connected."""

    def __enter__(self) -> Self:
        self.connect()
        return self

    def __exit__(
        self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: TracebackType | None
    ) -> None:
        self.disconnect()
