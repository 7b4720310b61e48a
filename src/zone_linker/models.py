"""Pydantic models for inbound resource-change events.

These models provide:
1. Type-safe parsing of the Event Grid payload
2. Validation at the boundary (fail fast, fail loudly)
3. The eligibility predicate deciding whether a link is warranted
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, Field, ValidationError

from .errors import InvalidEventShapeError

RESOURCE_WRITE_SUCCESS_EVENT = "Microsoft.Resources.ResourceWriteSuccess"
PRIVATE_DNS_ZONE_WRITE_OPERATION = "Microsoft.Network/privateDnsZones/write"

# Zones created for private AKS clusters are named <guid>.privatelink.<region>.azmk8s.io
AKS_ZONE_SUFFIX = "azmk8s.io"


class EventData(BaseModel):
    """The data section of a resource-change event."""

    model_config = {"extra": "ignore", "populate_by_name": True}

    operation_name: Annotated[str, Field(alias="operationName")]


class InboundEvent(BaseModel):
    """A resource-change event as delivered by Event Grid.

    Only the fields needed to decide on and drive the linking workflow
    are modelled; everything else in the payload is ignored.
    """

    model_config = {"extra": "ignore", "populate_by_name": True}

    event_type: Annotated[str, Field(alias="eventType")]
    subject: str
    data: EventData

    @classmethod
    def from_payload(cls, payload: Any) -> InboundEvent:
        """Validate a raw event payload.

        Raises:
            InvalidEventShapeError: If required fields are missing or mistyped.
        """
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            errors = []
            for error in e.errors():
                loc = ".".join(str(x) for x in error["loc"]) or "event"
                errors.append(f"{loc}: {error['msg']}")
            raise InvalidEventShapeError(errors) from e


def is_eligible(event: InboundEvent) -> bool:
    """Check whether the event is the creation of a private AKS DNS zone."""
    return (
        event.event_type == RESOURCE_WRITE_SUCCESS_EVENT
        and event.data.operation_name == PRIVATE_DNS_ZONE_WRITE_OPERATION
        and event.subject.endswith(AKS_ZONE_SUFFIX)
    )
