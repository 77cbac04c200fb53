"""
Table Entity Base Model - Persistence Boundary

TableModel is the base for every entity stored in Azure Table Storage.
It owns the keys and concurrency metadata (PartitionKey, RowKey,
Timestamp, ETag) and the conversion to and from the SDK's entity dicts.
Subclasses only describe their own properties.

Property names on the wire are PascalCase so rows stay readable by the
other tools that share the storage account.

Money is stored as two-decimal strings (PriceString, TotalPriceString)
because the table service has no decimal type. A string that does not
parse reads back as zero.

Exports:
    TableModel: Base model for table entities
    utc_now: Timezone-aware current time
    format_price: Decimal -> "0.00" string
    parse_price_string: Stored string -> Decimal (0 on failure)
"""

import uuid
from abc import abstractmethod
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, ClassVar, Dict, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T", bound="TableModel")

TWO_PLACES = Decimal("0.01")


def utc_now() -> datetime:
    """Helper function to get current UTC time."""
    return datetime.now(timezone.utc)


def format_price(value: Decimal) -> str:
    """Format a money value with exactly two decimals."""
    return f"{Decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP):.2f}"


def parse_price_string(value: Any) -> Decimal:
    """
    Read a stored money string back into a Decimal.

    Returns Decimal('0') for missing, malformed or non-finite values.
    """
    if value is None:
        return Decimal("0")
    try:
        parsed = Decimal(str(value).strip())
    except InvalidOperation:
        return Decimal("0")
    if not parsed.is_finite():
        return Decimal("0")
    return parsed


class TableModel(BaseModel):
    """
    Base model for Azure Table Storage entities.

    Subclasses set PARTITION and implement _entity_properties /
    _fields_from_entity. Keys and metadata are handled here.
    """

    model_config = ConfigDict(validate_assignment=True)

    PARTITION: ClassVar[str] = ""

    partition_key: str = Field(default="", description="Azure Table PartitionKey")
    row_key: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Azure Table RowKey")
    timestamp: Optional[datetime] = Field(default=None, description="Service-maintained last write time")
    etag: Optional[str] = Field(default=None, description="Concurrency token from the last read")

    def model_post_init(self, __context: Any) -> None:
        if not self.partition_key:
            self.partition_key = self.PARTITION

    @abstractmethod
    def _entity_properties(self) -> Dict[str, Any]:
        """Return the PascalCase properties this entity stores."""

    @classmethod
    @abstractmethod
    def _fields_from_entity(cls, entity: Mapping[str, Any]) -> Dict[str, Any]:
        """Map stored PascalCase properties to model field values."""

    def to_entity(self) -> Dict[str, Any]:
        """
        Convert to the dict shape accepted by TableClient.create_entity/update_entity.

        None values are left out; the table service has no null type.
        """
        entity = {
            "PartitionKey": self.partition_key,
            "RowKey": self.row_key,
        }
        for key, value in self._entity_properties().items():
            if value is not None:
                entity[key] = value
        return entity

    @classmethod
    def from_entity(cls: Type[T], entity: Mapping[str, Any]) -> T:
        """
        Build a model from a TableEntity (or plain dict).

        The etag and timestamp are taken from the SDK metadata when present.
        """
        metadata = getattr(entity, "metadata", None) or {}
        fields = cls._fields_from_entity(entity)
        return cls(
            partition_key=entity.get("PartitionKey", cls.PARTITION),
            row_key=entity.get("RowKey", ""),
            timestamp=metadata.get("timestamp"),
            etag=metadata.get("etag"),
            **fields,
        )
