"""Exceptions raised by the Waifu Vault client."""

from typing import Any, Optional


class WaifuVaultError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BuildError(WaifuVaultError):
    """The request could not be built; nothing was sent."""


class TransportError(WaifuVaultError):
    """The service could not be reached, or answered with something unreadable."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class ProtocolError(WaifuVaultError):
    """The response did not have a shape this endpoint can return."""

    def __init__(self, message: str, body: Any = None) -> None:
        super().__init__(message)
        self.body = body


class ServiceError(WaifuVaultError):
    """Error reported by the service itself."""

    def __init__(self, name: str, message: str, status: int) -> None:
        super().__init__(message)
        self.name = name
        self.status = status

    def __str__(self) -> str:
        return f"{self.name} ({self.status}): {self.message}"


class PasswordRequiredError(ServiceError):
    def __init__(self) -> None:
        super().__init__("Forbidden", "this file requires a password to download", 403)


class PasswordIncorrectError(ServiceError):
    def __init__(self) -> None:
        super().__init__("Forbidden", "supplied password is incorrect", 403)
