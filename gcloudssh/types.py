"""Type definitions for gcloud-ssh."""

from dataclasses import dataclass, field
from typing import Any, NamedTuple


class CommandResult(NamedTuple):
    """Exit status and captured output of one external command."""

    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class ShapeError(ValueError):
    """Raised by ``from_dict`` when a listing element has an unexpected shape."""


def _require_list(data: dict, key: str) -> list:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ShapeError(f"'{key}' must be a list, got {type(value).__name__}")
    return value


def _require_dict(value: Any, what: str) -> dict:
    if not isinstance(value, dict):
        raise ShapeError(f"{what} must be an object, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class AccessConfig:
    """External address binding on a network interface."""

    nat_ip: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "AccessConfig":
        data = _require_dict(data, "access config")
        nat_ip = data.get("natIP")
        if nat_ip is not None and not isinstance(nat_ip, str):
            raise ShapeError(f"'natIP' must be a string, got {type(nat_ip).__name__}")
        return cls(nat_ip=nat_ip)


@dataclass(frozen=True)
class NetworkInterface:
    access_configs: tuple[AccessConfig, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> "NetworkInterface":
        data = _require_dict(data, "network interface")
        return cls(
            access_configs=tuple(
                AccessConfig.from_dict(c) for c in _require_list(data, "accessConfigs")
            )
        )


@dataclass(frozen=True)
class Instance:
    """A VM record from ``gcloud compute instances list --format=json``."""

    name: str
    zone_url: str
    network_interfaces: tuple[NetworkInterface, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Any) -> "Instance":
        """Build an instance from one element of the listing.

        :param data: Decoded JSON object with 'name', 'zone' and optional 'networkInterfaces'
        :return: Parsed instance
        :raises ShapeError: If a required field is missing or has the wrong type
        """
        data = _require_dict(data, "instance")
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise ShapeError("instance 'name' must be a non-empty string")
        zone_url = data.get("zone")
        if not isinstance(zone_url, str):
            raise ShapeError(f"instance '{name}' has no 'zone' string")
        return cls(
            name=name,
            zone_url=zone_url,
            network_interfaces=tuple(
                NetworkInterface.from_dict(n)
                for n in _require_list(data, "networkInterfaces")
            ),
        )

    def zone(self) -> str:
        """Zone name from the zone URL, e.g. 'us-central1-a'.

        The URL looks like
        'https://www.googleapis.com/compute/v1/projects/PROJECT/zones/ZONE'.
        """
        return self.zone_url.rsplit("/", 1)[-1]

    def external_ip(self) -> str | None:
        """First NAT IP across all interfaces, then access configs, in order."""
        for interface in self.network_interfaces:
            for config in interface.access_configs:
                if config.nat_ip:
                    return config.nat_ip
        return None


@dataclass(frozen=True)
class ConnectionInfo:
    """Final connection details for the selected instance."""

    name: str
    zone: str
    ip: str
    username: str

    @property
    def command(self) -> str:
        return f"ssh {self.username}@{self.ip}"
