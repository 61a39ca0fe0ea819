from dataclasses import dataclass

from mdgate.config import AttributeSchemaConfig


@dataclass(frozen=True)
class AttributeSchema:
    """Attribute names every record must carry.

    Both sets are required independently; a key may belong to both or neither.
    """

    mandatory: frozenset[str]
    adjustable: frozenset[str]

    @classmethod
    def from_config(cls, config: AttributeSchemaConfig) -> "AttributeSchema":
        return cls(
            mandatory=frozenset(config.mandatory_attrs),
            adjustable=frozenset(config.adjustable_attrs),
        )
