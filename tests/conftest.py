"""Pytest configuration and fixtures."""

import sys
from pathlib import Path
from typing import Any

import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

# Add tests to path for azure_mock imports
tests_path = Path(__file__).parent
sys.path.insert(0, str(tests_path))

from zone_linker.config import Config, encode_target_virtual_networks  # noqa: E402

ZONE_ID = (
    "/subscriptions/S1/resourceGroups/RG1/providers/Microsoft.Network"
    "/privateDnsZones/foo.azmk8s.io"
)
VNET_A_ID = "/subscriptions/S1/resourceGroups/RG2/providers/Microsoft.Network/virtualNetworks/vnetA"
VNET_B_ID = "/subscriptions/S2/resourceGroups/RG3/providers/Microsoft.Network/virtualNetworks/vnetB"


def make_event(
    event_type: str = "Microsoft.Resources.ResourceWriteSuccess",
    subject: str = ZONE_ID,
    operation_name: str = "Microsoft.Network/privateDnsZones/write",
) -> dict[str, Any]:
    """Build an Event Grid resource-change event."""
    return {
        "id": "7a5d1f1e-0000-0000-0000-000000000000",
        "topic": "/subscriptions/S1",
        "eventType": event_type,
        "subject": subject,
        "eventTime": "2024-01-01T00:00:00Z",
        "dataVersion": "2",
        "data": {
            "operationName": operation_name,
            "status": "Succeeded",
            "resourceUri": subject,
        },
    }


def make_config(targets: list[str] | None = None, **overrides: Any) -> Config:
    """Build a managed identity configuration linking to the given targets."""
    values: dict[str, Any] = {
        "authentication_type": "APP_SERVICE_MSI",
        "msi_endpoint": "http://127.0.0.1:41741/msi/token",
        "target_vnets_encoded": encode_target_virtual_networks(
            [VNET_A_ID] if targets is None else targets
        ),
    }
    values.update(overrides)
    return Config(**values)


@pytest.fixture
def eligible_event() -> dict[str, Any]:
    """An event announcing creation of a private AKS DNS zone."""
    return make_event()


@pytest.fixture
def msi_config() -> Config:
    """Managed identity configuration with a single target vnet."""
    return make_config()
