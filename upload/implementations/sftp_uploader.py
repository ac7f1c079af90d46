"""
SFTP Uploader Implementation

Concrete implementation of UploaderInterface over SSH/SFTP using paramiko.
Each upload opens its own session and closes it afterwards.
"""

import logging
import posixpath
import socket
import stat
import time
from pathlib import Path
from typing import Optional

import paramiko

from config.settings import (
    SFTP_CONNECT_TIMEOUT,
    SFTP_HOST,
    SFTP_PASSWORD,
    SFTP_PORT,
    SFTP_PRIVATE_KEY_PATH,
    SFTP_STRICT_HOST_KEYS,
    SFTP_UPLOAD_DIR,
    SFTP_USERNAME,
)
from upload.constants import REMOTE_PATH_TEMPLATE, UploadMethod, UploadStatus
from upload.interfaces.uploader_interface import (
    UploadError,
    UploaderInterface,
    UploadResult,
    validate_artifact,
)


class SFTPUploader(UploaderInterface):
    """
    Uploads artifacts to <upload_dir>/<session id>/<filename> over SFTP.

    Authentication uses a private key when one is configured, a password
    otherwise.
    """

    method = UploadMethod.SFTP.value

    def __init__(
        self,
        host: str = SFTP_HOST,
        port: int = SFTP_PORT,
        username: str = SFTP_USERNAME,
        password: str = SFTP_PASSWORD,
        private_key_path: str = SFTP_PRIVATE_KEY_PATH,
        upload_dir: str = SFTP_UPLOAD_DIR,
        timeout: float = SFTP_CONNECT_TIMEOUT,
        strict_host_keys: bool = SFTP_STRICT_HOST_KEYS,
    ):
        self.logger = logging.getLogger(__name__)

        self.host = host
        self.port = port
        self.username = username
        self._password = password or None
        self._private_key_path = private_key_path or None
        self.upload_dir = upload_dir.rstrip("/") or "/"
        self.timeout = timeout
        self.strict_host_keys = strict_host_keys

        self.logger.info(
            f"SFTP Uploader initialized "
            f"({self.username}@{self.host}:{self.port}, dir: {self.upload_dir}, "
            f"password: {'***' if self._password else None}, "
            f"key: {'***' if self._private_key_path else None})",
        )

    def upload_file(self, artifact_path: Path, session_id: str) -> UploadResult:
        start_time = time.time()
        file_size = validate_artifact(artifact_path)

        remote_dir = posixpath.join(self.upload_dir, session_id)
        remote_path = REMOTE_PATH_TEMPLATE.format(
            base=self.upload_dir.rstrip("/"),
            session_id=session_id,
            filename=artifact_path.name,
        )

        client = self._connect()
        try:
            sftp = client.open_sftp()
            try:
                self._ensure_remote_dir(sftp, remote_dir)
                sftp.put(str(artifact_path), remote_path)
            finally:
                sftp.close()

        except (OSError, paramiko.SSHException) as e:
            raise UploadError(
                f"SFTP transfer failed for {artifact_path.name}: {e}",
                status=UploadStatus.NETWORK_ERROR,
            ) from e

        finally:
            client.close()

        location = f"sftp://{self.username}@{self.host}{remote_path}"
        self.logger.info(f"Uploaded to SFTP: {remote_path}")

        return UploadResult(
            success=True,
            location=location,
            method=self.method,
            upload_duration=time.time() - start_time,
            file_size=file_size,
        )

    def _connect(self) -> paramiko.SSHClient:
        """
        Open an authenticated SSH session.

        Raises:
            UploadError: On authentication or connection failure
        """
        client = paramiko.SSHClient()
        if self.strict_host_keys:
            client.load_system_host_keys()
            client.set_missing_host_key_policy(paramiko.RejectPolicy())
        else:
            client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

        try:
            client.connect(
                hostname=self.host,
                port=self.port,
                username=self.username,
                password=self._password,
                key_filename=self._private_key_path,
                timeout=self.timeout,
                allow_agent=False,
                look_for_keys=False,
            )
        except paramiko.AuthenticationException as e:
            client.close()
            raise UploadError(
                f"SFTP authentication failed for {self.username}@{self.host}: {e}",
                status=UploadStatus.AUTH_ERROR,
            ) from e
        except (OSError, socket.timeout, paramiko.SSHException) as e:
            client.close()
            raise UploadError(
                f"Cannot connect to SFTP host {self.host}:{self.port}: {e}",
                status=UploadStatus.NETWORK_ERROR,
            ) from e

        self.logger.debug(f"Connected to SFTP: {self.host} as {self.username}")
        return client

    def _ensure_remote_dir(self, sftp: paramiko.SFTPClient, remote_dir: str) -> None:
        """Create remote_dir component by component; existing dirs are fine"""
        current = "/" if remote_dir.startswith("/") else ""
        for part in [p for p in remote_dir.split("/") if p]:
            current = posixpath.join(current, part) if current else part
            if self._is_dir(sftp, current):
                continue
            try:
                sftp.mkdir(current)
            except OSError as e:
                # Created concurrently, or already present
                if not self._is_dir(sftp, current):
                    raise
                self.logger.debug(f"Remote directory check: {current} ({e})")

    @staticmethod
    def _is_dir(sftp: paramiko.SFTPClient, path: str) -> bool:
        try:
            attrs = sftp.stat(path)
        except OSError:
            return False
        return attrs.st_mode is not None and stat.S_ISDIR(attrs.st_mode)

    def is_available(self) -> bool:
        return bool(self.host and self.username)

    def get_target(self) -> Optional[str]:
        """Human-readable remote target (no credentials)"""
        return f"sftp://{self.username}@{self.host}:{self.port}{self.upload_dir}"
