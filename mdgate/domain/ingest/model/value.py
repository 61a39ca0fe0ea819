from dataclasses import dataclass


def dataset_path(experiment: str, processing: str, tier: str) -> str:
    """Canonical dataset identifier: ``/<experiment>/<processing>/<tier>``."""
    return f"/{experiment}/{processing}/{tier}"


@dataclass(frozen=True)
class IngestResult:
    """What an ingestion registered."""

    dataset: str
    did: str
    files: tuple[str, ...]
