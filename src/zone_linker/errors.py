"""Error kinds raised while handling a resource-change event.

Every error carries the step of the workflow that failed plus the
structured context needed to act on it (which id, which variable,
which target). None of them are recovered internally: they propagate
to the caller, which reports the invocation as failed.
"""

from __future__ import annotations

from typing import Any


class LinkerError(Exception):
    """Base class for all zone linker failures."""

    step: str = "unknown"


class ConfigurationError(LinkerError):
    """Raised when configuration validation fails."""

    step = "configuration"


class MissingConfigurationError(ConfigurationError):
    """Raised when a required environment variable is absent."""

    def __init__(self, variable: str, detail: str | None = None) -> None:
        self.variable = variable
        message = f"Required configuration {variable} is not set"
        if detail:
            message = f"{message}. {detail}"
        super().__init__(message)


class InvalidTargetListEncodingError(ConfigurationError):
    """Raised when the target virtual network list cannot be decoded."""

    step = "load_targets"

    def __init__(self, variable: str, reason: str) -> None:
        self.variable = variable
        self.reason = reason
        super().__init__(
            f"{variable} must be a base64 encoded JSON array of resource id strings: {reason}"
        )


class MalformedResourceIdError(LinkerError):
    """Raised when a resource id does not have the expected shape."""

    step = "decode_resource_id"

    def __init__(self, resource_id: Any) -> None:
        self.resource_id = resource_id
        super().__init__(
            "Resource id must look like /subscriptions/{sub}/resourceGroups/{rg}"
            f"/providers/{{namespace}}/{{type}}/{{name}}: {resource_id!r}"
        )


class UnsupportedAuthenticationTypeError(LinkerError):
    """Raised when the configured authentication strategy is unknown."""

    step = "authenticate"

    def __init__(self, authentication_type: str | None, variable: str) -> None:
        self.authentication_type = authentication_type
        self.variable = variable
        super().__init__(
            f"Unknown authentication type provided in {variable}: {authentication_type!r}"
        )


class CredentialAcquisitionError(LinkerError):
    """Raised when the identity exchange for a credential fails."""

    step = "authenticate"

    def __init__(self, authentication_type: str, reason: str) -> None:
        self.authentication_type = authentication_type
        self.reason = reason
        super().__init__(f"Failed to acquire credential via {authentication_type}: {reason}")


class InvalidEventShapeError(LinkerError):
    """Raised when an inbound event lacks required fields."""

    step = "validate_event"

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__("Invalid event:\n  - " + "\n  - ".join(errors))


class RemoteLinkOperationError(LinkerError):
    """Raised when creating a virtual network link fails for a target."""

    step = "create_link"

    def __init__(self, target_id: str, link_name: str, zone_name: str, reason: str) -> None:
        self.target_id = target_id
        self.link_name = link_name
        self.zone_name = zone_name
        self.reason = reason
        super().__init__(
            f"Failed to create virtual network link '{link_name}' on zone '{zone_name}' "
            f"for target {target_id}: {reason}"
        )
