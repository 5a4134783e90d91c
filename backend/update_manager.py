"""
Signed configuration updates for WireGuard

An update is applied in three steps, each attempted exactly once:
verify the signature, write the config file, reload the service.
The first failing step ends the update. A reload failure does not
roll back the file that was already written.
"""
import asyncio
import enum
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import List, Tuple

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey
from starlette.concurrency import run_in_threadpool

from errors import AuthenticationFailed, PersistError, ReloadError
from models import UpdateRequest
from signature import verify_signature
from utils import run_command

logger = logging.getLogger("uvicorn")

CONFIG_FILE_MODE = 0o600


class Outcome(enum.Enum):
    APPLIED = "applied"


def write_config_file(config_file: Path, config: str) -> bool:
    """
    Atomically replace config_file with config.

    The text goes to a temporary file next to the target which is then
    renamed over it, so readers see either the old or the new config.
    An existing file keeps its mode and ownership and must be writable;
    a new file is created with mode 0600.

    Returns:
        True if an existing file was overwritten, False if it was created
    """
    config_file = Path(config_file)
    existed = config_file.exists()
    if existed and not os.access(config_file, os.W_OK):
        raise PersistError(f"Error when writing config file {config_file}: not writable")

    tmp_name = None
    try:
        current = os.stat(config_file) if existed else None
        fd, tmp_name = tempfile.mkstemp(
            dir=config_file.parent, prefix=f".{config_file.name}.", suffix=".tmp"
        )
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(config)
            f.flush()
            os.fsync(f.fileno())
        if current is None:
            os.chmod(tmp_name, CONFIG_FILE_MODE)
        else:
            os.chmod(tmp_name, stat.S_IMODE(current.st_mode))
            if (current.st_uid, current.st_gid) != _owner(tmp_name):
                os.chown(tmp_name, current.st_uid, current.st_gid)
        os.replace(tmp_name, config_file)
        tmp_name = None
    except OSError as e:
        raise PersistError(f"Error when writing config file {config_file}: {e}") from e
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass

    if existed:
        logger.info(f"Overwrote existing config file {config_file}")
    else:
        logger.info(f"Created config file {config_file}")
    return existed


def _owner(path) -> Tuple[int, int]:
    st = os.stat(path)
    return st.st_uid, st.st_gid


def reload_service(command: List[str], use_sudo: bool = False):
    """Run the reload command, raising ReloadError on a non-zero exit"""
    success, output = run_command(command, use_sudo=use_sudo)
    if not success:
        raise ReloadError(f"Error when running {' '.join(command)}: {output.strip()}")
    logger.info(f"Reloaded service with: {' '.join(command)}")


class ConfigUpdater:
    """
    Applies signed configuration updates.

    Persisting and reloading are serialized so concurrent updates cannot
    interleave their writes and reloads; the last update to finish is the
    one both on disk and running.
    """

    def __init__(
        self,
        public_key: Ed25519PublicKey,
        config_file: Path,
        reload_command: List[str],
        use_sudo: bool = False,
    ):
        self._public_key = public_key
        self.config_file = Path(config_file)
        self.reload_command = list(reload_command)
        self.use_sudo = use_sudo
        self._lock = asyncio.Lock()

    def verify(self, update: UpdateRequest) -> str:
        """Return the config text if the update is signed by the trusted key"""
        message = update.message.encode("utf-8")
        if not verify_signature(self._public_key, message, update.signature):
            raise AuthenticationFailed("Signature does not match the trusted key")
        return update.message

    async def apply(self, update: UpdateRequest) -> Outcome:
        config = self.verify(update)

        async with self._lock:
            await run_in_threadpool(write_config_file, self.config_file, config)
            await run_in_threadpool(reload_service, self.reload_command, self.use_sudo)

        return Outcome.APPLIED
