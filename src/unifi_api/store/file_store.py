"""File-backed credential store with a permission check and atomic writes."""

import os
import shutil
import stat
import tempfile
from pathlib import Path
from typing import Protocol, Union

import structlog
from pydantic import ValidationError

from unifi_api.api.exceptions import CredentialStoreError, NotFound, PermissionDenied
from unifi_api.models import AuthRecord

log = structlog.get_logger()

DEFAULT_AUTH_FILE = Path("~/.unifi-auth")

# Bits that must be clear: no access for group or other
INSECURE_MODE_BITS = 0o077


class CredentialStore(Protocol):
    """Loads and saves authentication information."""

    def load(self) -> AuthRecord:
        ...

    def save(self, record: AuthRecord) -> None:
        ...


class FileCredentialStore:
    """Stores an AuthRecord as JSON in a single owner-only file.

    Uses the temp file + rename pattern so a crash never leaves a half
    written auth file behind.
    """

    def __init__(self, path: Union[str, Path] = DEFAULT_AUTH_FILE) -> None:
        """Initialize the store.

        Args:
            path: Auth file location; ``~`` is expanded.
        """
        self.path = Path(path).expanduser()

    def load(self) -> AuthRecord:
        """Read the auth file after checking its permissions.

        Returns:
            The stored credential and cookies.

        Raises:
            NotFound: File does not exist.
            PermissionDenied: File is accessible by group/other, or unreadable.
            CredentialStoreError: File is not a valid auth record.
        """
        try:
            st = self.path.stat()
        except FileNotFoundError:
            raise NotFound(str(self.path))
        except PermissionError:
            raise PermissionDenied(f"Cannot stat auth file {self.path}: permission denied")

        mode = stat.S_IMODE(st.st_mode)
        if mode & INSECURE_MODE_BITS:
            log.error("auth_file_insecure", path=str(self.path), mode=f"{mode:04o}")
            raise PermissionDenied(
                f"Security check failed on {self.path}: mode is {mode:04o}; "
                "it should not be accessible by group/other",
                hint=f"Run 'chmod 600 {self.path}'.",
            )

        try:
            raw = self.path.read_text(encoding="utf-8")
        except PermissionError:
            raise PermissionDenied(f"Cannot read auth file {self.path}: permission denied")

        try:
            record = AuthRecord.model_validate_json(raw)
        except ValidationError as e:
            raise CredentialStoreError(f"Bad auth file {self.path}: {e}")

        log.debug(
            "auth_file_loaded",
            path=str(self.path),
            host=record.controller_host,
            cookie_count=len(record.cookies),
        )
        return record

    def save(self, record: AuthRecord) -> None:
        """Write the record atomically with mode 0600.

        Raises:
            CredentialStoreError: Directory is not writable.
        """
        directory = self.path.parent
        directory.mkdir(parents=True, exist_ok=True)
        content = record.model_dump_json(indent=2) + "\n"

        # mkstemp creates the file 0600
        temp_fd, temp_path = tempfile.mkstemp(
            dir=directory,
            prefix=".tmp-unifi-auth-",
            suffix=".json",
        )
        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.chmod(temp_path, 0o600)
            shutil.move(temp_path, self.path)
        except PermissionError:
            Path(temp_path).unlink(missing_ok=True)
            log.error("auth_file_write_permission_denied", path=str(directory))
            raise CredentialStoreError(f"Cannot write auth file {self.path}: permission denied")
        except Exception:
            Path(temp_path).unlink(missing_ok=True)
            raise

        log.info("cookies_saved", path=str(self.path), cookie_count=len(record.cookies))
