"""Linking of private AKS DNS zones to a fixed set of virtual networks.

This module implements the event handling workflow:
1. Validate the inbound event and decide whether it is a private AKS
   DNS zone creation (anything else is skipped, not failed)
2. Acquire a credential
3. Decode the zone resource id and every configured target
4. Create or update one virtual network link per target, in order

Configuration errors are all-or-nothing: every target id is decoded
before the first link call, so a malformed entry links nothing. Remote
failures are not rolled back; links created for earlier targets stay.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from azure.core.credentials import TokenCredential
from azure.core.exceptions import AzureError
from azure.mgmt.privatedns import PrivateDnsManagementClient
from azure.mgmt.privatedns.models import SubResource, VirtualNetworkLink

from .config import Config
from .errors import RemoteLinkOperationError
from .models import InboundEvent, is_eligible
from .resource_id import ResourceIdentifier, decode
from .security import authenticate

logger = logging.getLogger(__name__)

LINK_LOCATION = "global"

ClientFactory = Callable[[TokenCredential, str], Any]


class LinkStatus(str, Enum):
    """Outcome of handling a single event."""

    SKIPPED = "skipped"
    LINKED = "linked"


@dataclass
class LinkResult:
    """Result of handling a single event.

    Attributes:
        status: Whether the event was skipped or links were created.
        subject: Resource id the event was about.
        zone: Decoded zone identifier (only when linked).
        links: Names of the links created, in creation order.
    """

    status: LinkStatus
    subject: str
    zone: ResourceIdentifier | None = None
    links: list[str] = field(default_factory=list)

    @property
    def skipped(self) -> bool:
        return self.status == LinkStatus.SKIPPED


def build_link_parameters(target: ResourceIdentifier) -> VirtualNetworkLink:
    """Build the link payload for a target virtual network."""
    return VirtualNetworkLink(
        location=LINK_LOCATION,
        virtual_network=SubResource(id=target.raw_id),
        registration_enabled=False,
    )


class ZoneLinker:
    """Event handler linking private AKS DNS zones to target virtual networks.

    The linker holds no state between events. Each call to handle()
    acquires its own credential and client, so concurrent invocations
    do not share anything beyond the immutable configuration.
    """

    def __init__(
        self,
        config: Config,
        client_factory: ClientFactory | None = None,
    ) -> None:
        """Initialize linker with configuration.

        Args:
            config: Zone linker configuration.
            client_factory: Builds a private DNS management client from a
                credential and a subscription id. Defaults to
                PrivateDnsManagementClient.
        """
        self._config = config
        self._client_factory = client_factory

    def handle(self, payload: Any) -> LinkResult:
        """Handle one resource-change event.

        Args:
            payload: The event as parsed from JSON.

        Returns:
            LinkResult describing whether links were created.

        Raises:
            LinkerError: If any step of the workflow fails.
        """
        logger.info("Event grid trigger processed an event", extra={"event": payload})

        event = InboundEvent.from_payload(payload)
        if not is_eligible(event):
            logger.info(
                "Bailing. Link shouldn't be created for resource id",
                extra={"subject": event.subject, "event_type": event.event_type},
            )
            return LinkResult(status=LinkStatus.SKIPPED, subject=event.subject)

        logger.info("Proceeding to process event", extra={"subject": event.subject})

        credential = authenticate(self._config)
        zone = decode(event.subject)
        client_factory = self._client_factory or PrivateDnsManagementClient
        client = client_factory(credential, zone.subscription_id)

        targets = [decode(target_id) for target_id in self._config.target_virtual_networks()]
        if not targets:
            logger.warning("No target virtual networks configured", extra={"zone": zone.name})

        result = LinkResult(status=LinkStatus.LINKED, subject=event.subject, zone=zone)
        for target in targets:
            self._create_link(client, zone, target)
            result.links.append(target.name)

        logger.info(
            "Finished linking zone",
            extra={"zone": zone.name, "links_created": len(result.links)},
        )
        return result

    def _create_link(
        self,
        client: PrivateDnsManagementClient,
        zone: ResourceIdentifier,
        target: ResourceIdentifier,
    ) -> Any:
        """Create or update the link between the zone and one target.

        Raises:
            RemoteLinkOperationError: If the remote call fails.
        """
        link_name = target.name
        try:
            poller = client.virtual_network_links.begin_create_or_update(
                zone.resource_group_name,
                zone.name,
                link_name,
                build_link_parameters(target),
            )
            link = poller.result()
        except AzureError as e:
            logger.error(
                "Failed to create virtual network link",
                extra={
                    "zone": zone.name,
                    "link_name": link_name,
                    "target": target.raw_id,
                    "status_code": getattr(e, "status_code", None),
                    "error": str(e),
                },
            )
            raise RemoteLinkOperationError(target.raw_id, link_name, zone.name, str(e)) from e

        logger.info(
            "Created virtual network link",
            extra={
                "zone": zone.name,
                "link_name": link_name,
                "target": target.raw_id,
                "link": link.as_dict() if hasattr(link, "as_dict") else link,
            },
        )
        return link
