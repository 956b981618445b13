"""Remote file store over SFTP (paramiko); one fresh connection per call."""
from __future__ import annotations

import io
import logging
import posixpath
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import paramiko
from pydantic import BaseModel

from dimagram import config
from dimagram.core.errors import RemoteIOError

logger = logging.getLogger(__name__)


class SftpConfig(BaseModel):
    """Connection settings for the remote store."""

    host: str = ""
    port: int = 22
    user: str = ""
    password: str = ""
    private_key_path: str = ""
    known_hosts_path: str = ""
    # Accept unknown host keys. Off unless explicitly configured.
    insecure_skip_host_key_check: bool = False
    timeout: float = config.SFTP_TIMEOUT_SEC
    pointer_name: str = config.POINTER_NAME
    content_dir: str = config.CONTENT_DIR

    @property
    def is_configured(self) -> bool:
        return bool(self.host and self.user and (self.password or self.private_key_path))

    @classmethod
    def from_env(cls) -> SftpConfig:
        """Create config from environment variables (see dimagram.config)."""
        try:
            port = int(config.SFTP_PORT or "22")
        except ValueError as e:
            raise RemoteIOError(f"invalid SFTP port: {config.SFTP_PORT!r}") from e
        return cls(
            host=config.SFTP_HOST,
            port=port,
            user=config.SFTP_USER,
            password=config.SFTP_PASSWORD,
            private_key_path=config.SFTP_PRIVATE_KEY_PATH,
            known_hosts_path=config.SFTP_KNOWN_HOSTS,
            insecure_skip_host_key_check=config.SFTP_INSECURE_SKIP_HOST_KEY_CHECK,
        )


class RemoteSession:
    """Operations on an open SFTP session."""

    def __init__(self, sftp: paramiko.SFTPClient) -> None:
        self._sftp = sftp

    def ensure_directory(self, path: str) -> None:
        """Create path and any missing parents (mkdir -p)."""
        current = "/" if path.startswith("/") else ""
        for part in [p for p in path.split("/") if p]:
            current = posixpath.join(current, part) if current else part
            try:
                self._sftp.stat(current)
            except FileNotFoundError:
                self._sftp.mkdir(current)

    def create_or_replace(self, path: str, data: bytes) -> None:
        """Write data to path, replacing any existing file."""
        self._sftp.putfo(io.BytesIO(data), path)

    def copy(self, local_path: Path, remote_path: str) -> None:
        self._sftp.put(str(local_path), remote_path)


class RemoteSync:
    """Remote Sync Adapter: places bytes and files on the SFTP store."""

    def __init__(self, sftp_config: SftpConfig) -> None:
        self.config = sftp_config

    def _client(self) -> paramiko.SSHClient:
        client = paramiko.SSHClient()
        client.load_system_host_keys()
        if self.config.known_hosts_path:
            client.load_host_keys(self.config.known_hosts_path)
        if self.config.insecure_skip_host_key_check:
            logger.warning(
                "Host key verification disabled for %s (insecure_skip_host_key_check)",
                self.config.host,
            )
            client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        else:
            client.set_missing_host_key_policy(paramiko.RejectPolicy())
        return client

    @contextmanager
    def connect(self) -> Iterator[RemoteSession]:
        """Open SSH + SFTP, yield a session, and tear both down afterwards.

        Any connect, auth, host key or transfer failure becomes RemoteIOError.
        """
        if not self.config.is_configured:
            raise RemoteIOError("required SFTP settings not set (host, user, password or key)")
        auth = {}
        if self.config.password:
            auth["password"] = self.config.password
        else:
            auth["key_filename"] = self.config.private_key_path
        addr = f"{self.config.host}:{self.config.port}"
        try:
            client = self._client()
        except (OSError, paramiko.SSHException) as e:
            raise RemoteIOError(f"unable to load known hosts: {e}") from e
        try:
            client.connect(
                self.config.host,
                port=self.config.port,
                username=self.config.user,
                timeout=self.config.timeout,
                allow_agent=False,
                look_for_keys=False,
                **auth,
            )
            sftp = client.open_sftp()
        except (OSError, paramiko.SSHException) as e:
            client.close()
            raise RemoteIOError(f"failed to connect to SSH server {addr}: {e}") from e
        try:
            yield RemoteSession(sftp)
        except (OSError, paramiko.SSHException) as e:
            raise RemoteIOError(f"SFTP transfer to {addr} failed: {e}") from e
        finally:
            sftp.close()
            client.close()

    def ensure_directory(self, path: str) -> None:
        with self.connect() as session:
            session.ensure_directory(path)

    def create_or_replace(self, path: str, data: bytes) -> None:
        with self.connect() as session:
            session.create_or_replace(path, data)

    def copy(self, local_path: Path, remote_path: str) -> None:
        with self.connect() as session:
            session.copy(local_path, remote_path)

    def put_pointer(self, data: bytes) -> None:
        """Unconditionally replace the remote pointer object."""
        self.create_or_replace(self.config.pointer_name, data)
        logger.info("Uploaded pointer to SFTP server as '%s'", self.config.pointer_name)

    def put_content(self, local_path: Path, address: str) -> str:
        """Upload a content blob to <content_dir>/<address>; returns the remote path."""
        remote_path = posixpath.join(self.config.content_dir, address)
        with self.connect() as session:
            session.ensure_directory(self.config.content_dir)
            session.copy(local_path, remote_path)
        logger.info("Uploaded file to SFTP server at '%s'", remote_path)
        return remote_path
