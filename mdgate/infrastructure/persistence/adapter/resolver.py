from mdgate.domain.ingest.port.file_resolver import FileResolver


class LiteralPathResolver(FileResolver):
    """Resolves a path to itself; no directory expansion or existence check."""

    def resolve(self, path: str) -> list[str]:
        return [path] if path else []
