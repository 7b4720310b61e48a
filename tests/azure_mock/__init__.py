"""Azure API Mock for end-to-end testing.

This module provides mock implementations of the Azure identity and
Private DNS management APIs so the linking workflow can be exercised
without Azure connectivity.

Key Features:
- Credential simulation for both authentication strategies
- Recording of every virtual network link call in order
- Error injection for authentication and per-link failures

Usage:
    from azure_mock import MockAzureContext

    with MockAzureContext(failing_links={"vnetB"}) as ctx:
        ZoneLinker(config).handle(event)

        assert len(ctx.link_calls) == 2
"""

from .context import MockAzureContext, mock_azure_context
from .credential import MockTokenCredential, create_mock_credential
from .privatedns import LinkCall, MockPrivateDnsClient, MockVirtualNetworkLink

__all__ = [
    "LinkCall",
    "MockAzureContext",
    "MockPrivateDnsClient",
    "MockTokenCredential",
    "MockVirtualNetworkLink",
    "create_mock_credential",
    "mock_azure_context",
]
