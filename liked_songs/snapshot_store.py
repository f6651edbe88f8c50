"""S3 storage for the liked songs snapshot."""

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from liked_songs.utils.logger import get_logger


logger = get_logger()

BUCKET = "markaronin-liked-songs"
KEY = "liked-songs.txt"
DEFAULT_REGION = "us-east-1"


class SnapshotStoreError(Exception):
    """Exception raised when the snapshot cannot be read or written."""
    pass


def create_s3_client():
    """
    Create an S3 client from the standard AWS configuration chain.

    Falls back to us-east-1 when no region is configured.
    """
    session = boto3.session.Session()
    region = session.region_name or DEFAULT_REGION
    return session.client('s3', region_name=region)


class SnapshotStore:
    """Reads and replaces the snapshot object at a single fixed location."""

    def __init__(self, bucket: str = BUCKET, key: str = KEY, client=None):
        """
        Initialize snapshot store.

        Args:
            bucket: S3 bucket name
            key: Object key of the snapshot
            client: Optional boto3 S3 client; created lazily when omitted
        """
        self.bucket = bucket
        self.key = key
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = create_s3_client()
        return self._client

    def download(self) -> str:
        """
        Fetch the current snapshot text.

        Returns:
            Object body decoded as UTF-8

        Raises:
            SnapshotStoreError: If the object is missing, the backend fails,
                or the body is not valid UTF-8
        """
        location = f"s3://{self.bucket}/{self.key}"
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=self.key)
            with response['Body'] as stream:
                body = stream.read()
            text = body.decode('utf-8')
        except ClientError as e:
            code = e.response.get('Error', {}).get('Code', 'Unknown')
            logger.error(f"Failed to download snapshot from {location}: {code}")
            raise SnapshotStoreError(f"Cannot download {location}: {code}") from e
        except BotoCoreError as e:
            logger.error(f"Failed to download snapshot from {location}: {e}")
            raise SnapshotStoreError(f"Cannot download {location}: {e}") from e
        except UnicodeDecodeError as e:
            logger.error(f"Snapshot at {location} is not valid UTF-8")
            raise SnapshotStoreError(f"Snapshot at {location} is not valid UTF-8: {e}") from e

        logger.info(f"Downloaded snapshot from {location} ({len(body)} bytes)")
        return text

    def upload(self, text: str) -> None:
        """
        Replace the snapshot with the given text.

        No conditional write is made: a concurrent run may overwrite it.

        Raises:
            SnapshotStoreError: If the backend rejects the write
        """
        location = f"s3://{self.bucket}/{self.key}"
        body = text.encode('utf-8')
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=self.key,
                Body=body,
                ContentType='text/plain; charset=utf-8'
            )
        except ClientError as e:
            code = e.response.get('Error', {}).get('Code', 'Unknown')
            logger.error(f"Failed to upload snapshot to {location}: {code}")
            raise SnapshotStoreError(f"Cannot upload {location}: {code}") from e
        except BotoCoreError as e:
            logger.error(f"Failed to upload snapshot to {location}: {e}")
            raise SnapshotStoreError(f"Cannot upload {location}: {e}") from e

        logger.info(f"Uploaded snapshot to {location} ({len(body)} bytes)")
