"""Local SSH key pair: locate, create the key directory, generate if missing."""

from pathlib import Path

from .errors import HomeDirectoryUnavailable, IoFailure
from .providers import GCloudProvider
from .utils import log, restrict_to_owner

SSH_DIR_NAME = ".ssh"
PRIVATE_KEY_NAME = "id_rsa"
PUBLIC_KEY_NAME = "id_rsa.pub"


def resolve_home(home: Path | None = None) -> Path:
    """:raises HomeDirectoryUnavailable: If no home directory can be determined"""
    if home is not None:
        return home
    try:
        return Path.home()
    except (RuntimeError, KeyError) as e:
        raise HomeDirectoryUnavailable() from e


def key_paths(home: Path | None = None) -> tuple[Path, Path]:
    """:return: (private_key_path, public_key_path) under ~/.ssh"""
    ssh_dir = resolve_home(home) / SSH_DIR_NAME
    return ssh_dir / PRIVATE_KEY_NAME, ssh_dir / PUBLIC_KEY_NAME


def key_pair_exists(home: Path | None = None) -> bool:
    """Both halves must be present; a lone public or private key does not count."""
    private_key, public_key = key_paths(home)
    return private_key.is_file() and public_key.is_file()


def ensure_key_dir(home: Path | None = None) -> Path:
    """Create ~/.ssh with mode 0700 if it does not exist.

    :return: Path to the key directory
    :raises IoFailure: If the directory cannot be created or restricted
    """
    ssh_dir = resolve_home(home) / SSH_DIR_NAME
    if ssh_dir.is_dir():
        return ssh_dir

    log(f"Creating '{ssh_dir}' directory...")
    try:
        ssh_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IoFailure(f"Failed to create '{ssh_dir}': {e}") from e
    try:
        restrict_to_owner(ssh_dir)
    except OSError as e:
        raise IoFailure(f"Failed to set permissions on '{ssh_dir}': {e}") from e
    return ssh_dir


def ensure_key_pair(provider: GCloudProvider, home: Path | None = None) -> bool:
    """Make sure the fixed id_rsa key pair exists, generating it if needed.

    :param provider: gcloud wrapper used for key generation
    :param home: Home directory override (defaults to the operator's)
    :return: True if a new key pair was generated, False if one already existed
    :raises HomeDirectoryUnavailable: If the home directory cannot be resolved
    :raises IoFailure: If the key directory cannot be prepared
    :raises KeyGenerationFailed: If gcloud fails to generate the key
    """
    home = resolve_home(home)
    ensure_key_dir(home)

    if key_pair_exists(home):
        log("SSH key pair already exists")
        return False

    log("No SSH key found. Generating new key pair...")
    provider.generate_ssh_key()
    log("SSH key generated successfully")
    return True


def read_public_key(home: Path | None = None) -> str:
    """:raises IoFailure: If the public key cannot be read"""
    _, public_key = key_paths(home)
    try:
        return public_key.read_text()
    except (OSError, UnicodeDecodeError) as e:
        raise IoFailure(f"Failed to read SSH public key '{public_key}': {e}") from e
