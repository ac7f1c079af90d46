"""
S3 Uploader Implementation

Concrete implementation of UploaderInterface for Amazon S3 using boto3.
Objects are stored under <folder>/<session id>/<filename>.
"""

import logging
import time
from pathlib import Path
from typing import Any, Optional

import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from config.settings import (
    AWS_ACCESS_KEY_ID,
    AWS_REGION,
    AWS_S3_BUCKET,
    AWS_S3_FOLDER,
    AWS_SECRET_ACCESS_KEY,
    S3_CONTENT_TYPE,
)
from upload.constants import (
    REMOTE_PATH_TEMPLATE,
    S3_LOCATION_TEMPLATE,
    UploadMethod,
    UploadStatus,
)
from upload.interfaces.uploader_interface import (
    UploadError,
    UploaderInterface,
    UploadResult,
    validate_artifact,
)


class S3Uploader(UploaderInterface):
    """
    Object-storage backend.

    Credentials come from the arguments when given, otherwise boto3's
    default credential chain (environment, config files, instance role).
    """

    method = UploadMethod.S3.value

    def __init__(
        self,
        bucket: str = AWS_S3_BUCKET,
        folder: str = AWS_S3_FOLDER,
        region: str = AWS_REGION,
        access_key_id: Optional[str] = AWS_ACCESS_KEY_ID,
        secret_access_key: Optional[str] = AWS_SECRET_ACCESS_KEY,
        client: Optional[Any] = None,
    ):
        """
        Initialize S3 uploader.

        Args:
            bucket: Target bucket name
            folder: Key prefix under which session folders are created
            region: AWS region of the bucket
            access_key_id: Optional explicit access key
            secret_access_key: Optional explicit secret key
            client: Pre-built S3 client (tests)
        """
        self.logger = logging.getLogger(__name__)

        self.bucket = bucket
        self.folder = folder.strip("/")
        self.region = region

        self._client = client or boto3.client(
            "s3",
            region_name=region,
            aws_access_key_id=access_key_id or None,
            aws_secret_access_key=secret_access_key or None,
        )

        self.logger.info(
            f"S3 Uploader initialized (bucket: {bucket}, folder: {self.folder}, "
            f"region: {region})",
        )

    def build_key(self, artifact_path: Path, session_id: str) -> str:
        """Object key for an artifact, namespaced by session id"""
        return REMOTE_PATH_TEMPLATE.format(
            base=self.folder,
            session_id=session_id,
            filename=artifact_path.name,
        ).lstrip("/")

    def upload_file(self, artifact_path: Path, session_id: str) -> UploadResult:
        if not self.bucket:
            raise UploadError(
                "AWS_S3_BUCKET is not configured",
                status=UploadStatus.CONFIG_ERROR,
            )

        start_time = time.time()
        file_size = validate_artifact(artifact_path)
        key = self.build_key(artifact_path, session_id)

        try:
            self._client.upload_file(
                str(artifact_path),
                self.bucket,
                key,
                ExtraArgs={"ContentType": S3_CONTENT_TYPE},
            )
        except NoCredentialsError as e:
            raise UploadError(
                f"S3 credentials not available: {e}",
                status=UploadStatus.AUTH_ERROR,
            ) from e
        except (S3UploadFailedError, ClientError, BotoCoreError) as e:
            raise UploadError(
                f"S3 upload failed for {artifact_path.name}: {e}",
                status=UploadStatus.NETWORK_ERROR,
            ) from e
        except OSError as e:
            raise UploadError(
                f"Cannot read {artifact_path.name} for S3 upload: {e}",
                status=UploadStatus.INVALID_FILE,
            ) from e

        location = S3_LOCATION_TEMPLATE.format(
            bucket=self.bucket,
            region=self.region,
            key=key,
        )
        self.logger.info(f"Uploaded to S3: {location}")

        return UploadResult(
            success=True,
            location=location,
            method=self.method,
            upload_duration=time.time() - start_time,
            file_size=file_size,
        )

    def is_available(self) -> bool:
        return bool(self.bucket)
