from mdgate.domain.ingest.model.record import Record
from mdgate.domain.ingest.model.schema import AttributeSchema
from mdgate.domain.shared.error import MissingAdjustableAttrsError, MissingMandatoryAttrsError
from mdgate.domain.shared.service import Service


class SchemaValidator(Service):
    """Checks that a record carries every mandatory and adjustable attribute."""

    schema: AttributeSchema

    def validate(self, record: Record) -> None:
        """Raise if the record's keys do not cover both attribute sets.

        Keys are unique in a record, so comparing the size of the matched subset
        with the size of the schema set is equivalent to a subset check.

        Raises:
            MissingMandatoryAttrsError: If a mandatory attribute is absent
            MissingAdjustableAttrsError: If an adjustable attribute is absent
        """
        keys = record.keys()
        mandatory = sorted(k for k in keys if k in self.schema.mandatory)
        adjustable = sorted(k for k in keys if k in self.schema.adjustable)

        if len(mandatory) != len(self.schema.mandatory):
            raise MissingMandatoryAttrsError(
                "List of records keys does not have all mandatory attributes"
                f"\nList of records keys: {keys}"
                f"\nList of mandatory attrs: {mandatory}",
                keys=keys,
                matched=mandatory,
            )
        if len(adjustable) != len(self.schema.adjustable):
            raise MissingAdjustableAttrsError(
                "List of records keys does not have all adjustable attributes"
                f"\nList of records keys: {keys}"
                f"\nList of adjustable attrs: {adjustable}",
                keys=keys,
                matched=adjustable,
            )
