"""Check the package index for a newer release."""

from dataclasses import dataclass

import httpx

PYPI_URL = "https://pypi.org/pypi/gcloud-ssh/json"
UPDATE_TIMEOUT = 5


class UpdateCheckFailed(Exception):
    pass


@dataclass(frozen=True)
class UpdateStatus:
    current: str
    latest: str

    @property
    def available(self) -> bool:
        return parse_version(self.latest) > parse_version(self.current)


def parse_version(version: str) -> tuple[int, ...]:
    """Leading numeric components of a dotted version ('1.2.3rc1' -> (1, 2, 3))."""
    parts = []
    for piece in version.strip().lstrip("v").split("."):
        digits = ""
        for ch in piece:
            if not ch.isdigit():
                break
            digits += ch
        if not digits:
            break
        parts.append(int(digits))
        if len(digits) != len(piece):
            break
    return tuple(parts)


def check_for_update(current: str, client: httpx.Client | None = None) -> UpdateStatus:
    """Compare the running version with the latest published one.

    :param current: Installed version
    :param client: HTTP client to use (a short-lived one by default)
    :return: Current and latest versions
    :raises UpdateCheckFailed: If the index cannot be reached or returns bad data
    """
    owns_client = client is None
    client = client or httpx.Client(timeout=UPDATE_TIMEOUT)
    try:
        response = client.get(PYPI_URL)
        response.raise_for_status()
        latest = response.json()["info"]["version"]
    except httpx.HTTPError as e:
        raise UpdateCheckFailed(f"Could not reach the package index: {e}") from e
    except (ValueError, KeyError, TypeError) as e:
        raise UpdateCheckFailed(f"Unexpected response from the package index: {e}") from e
    finally:
        if owns_client:
            client.close()

    if not isinstance(latest, str):
        raise UpdateCheckFailed(f"Unexpected version value: {latest!r}")
    return UpdateStatus(current=current, latest=latest)
