from abc import abstractmethod
from typing import Protocol

from mdgate.domain.shared.port import Port


class FileRegistry(Port, Protocol):
    """Catalogue of registered datasets and their files."""

    @abstractmethod
    async def register_files(
        self,
        experiment: str,
        processing: str,
        tier: str,
        files: list[str],
    ) -> str:
        """Register ``files`` under the dataset built from experiment/processing/tier.

        Returns:
            The dataset identifier (did)

        Raises:
            StorageUnavailableError: If the catalogue rejects the write
        """
        ...
