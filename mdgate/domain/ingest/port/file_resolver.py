from abc import abstractmethod
from typing import Protocol

from mdgate.domain.shared.port import Port


class FileResolver(Port, Protocol):
    """Resolves a record ``path`` to the files it denotes."""

    @abstractmethod
    def resolve(self, path: str) -> list[str]: ...
