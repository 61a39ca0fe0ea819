"""Record: the attribute mapping submitted for registration."""

from collections.abc import Iterator

from pydantic import JsonValue, RootModel

from mdgate.domain.shared.error import TypeMismatchError

# string, number, bool, null, or nested list/mapping of those
AttributeValue = JsonValue


class Record(RootModel[dict[str, AttributeValue]]):
    """Mapping from attribute name to attribute value.

    Values are read through checked accessors; the ingestion pipeline
    enriches the record in place (``dataset``, ``did``, ``path``).
    """

    def __getitem__(self, key: str) -> AttributeValue:
        return self.root[key]

    def __setitem__(self, key: str, value: AttributeValue) -> None:
        self.root[key] = value

    def __contains__(self, key: object) -> bool:
        return key in self.root

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def keys(self) -> list[str]:
        """Sorted attribute names."""
        return sorted(self.root)

    def get(self, key: str, default: AttributeValue = None) -> AttributeValue:
        return self.root.get(key, default)

    def require_str(self, key: str) -> str:
        """Return the string value of ``key``.

        Raises:
            TypeMismatchError: If the attribute is absent or not a string
        """
        if key not in self.root:
            raise TypeMismatchError(f"Record attribute '{key}' is missing", field=key)
        value = self.root[key]
        if not isinstance(value, str):
            raise TypeMismatchError(
                f"Record attribute '{key}' must be a string, got {type(value).__name__}",
                field=key,
            )
        return value

    def to_dict(self) -> dict[str, AttributeValue]:
        return dict(self.root)
