"""Decoding of Azure resource ids.

Azure resource ids follow the pattern:
/subscriptions/{sub}/resourceGroups/{rg}/providers/{namespace}/{type}/{name}

Only top-level resources are supported. Child resources (more segments
after the provider namespace) are rejected instead of being mis-parsed.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import MalformedResourceIdError

# Three positional captures: subscription, resource group, resource name
RESOURCE_ID_PATTERN = re.compile(
    r"/subscriptions/([^/\s]+)/resourceGroups/([^/\s]+)/providers/[^/\s]+/[^/\s]+/([^/\s]+)",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ResourceIdentifier:
    """Structured view of a resource id.

    Attributes:
        raw_id: The resource id exactly as received.
        subscription_id: Subscription segment.
        resource_group_name: Resource group segment.
        name: Final segment, the resource name.
    """

    raw_id: str
    subscription_id: str
    resource_group_name: str
    name: str

    def __post_init__(self) -> None:
        if not all((self.raw_id, self.subscription_id, self.resource_group_name, self.name)):
            raise MalformedResourceIdError(self.raw_id)


def decode(raw_id: str) -> ResourceIdentifier:
    """Decode a resource id into its subscription, resource group and name.

    Args:
        raw_id: Full ARM resource id.

    Returns:
        The decoded identifier.

    Raises:
        MalformedResourceIdError: If the id does not have the expected shape.
    """
    if not isinstance(raw_id, str):
        raise MalformedResourceIdError(raw_id)

    match = RESOURCE_ID_PATTERN.fullmatch(raw_id)
    if match is None:
        raise MalformedResourceIdError(raw_id)

    subscription_id, resource_group_name, name = match.groups()
    return ResourceIdentifier(
        raw_id=raw_id,
        subscription_id=subscription_id,
        resource_group_name=resource_group_name,
        name=name,
    )
