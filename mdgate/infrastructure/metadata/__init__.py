from mdgate.infrastructure.metadata.di import MetadataProvider

__all__ = ["MetadataProvider"]
