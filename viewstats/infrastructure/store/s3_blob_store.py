from botocore.exceptions import BotoCoreError, ClientError

from config.s3_client import AWS_S3_BUCKET, build_s3_key, get_s3_client
from viewstats.application.port.blob_store_port import BlobStorePort

_MISSING_KEY_CODES = {"NoSuchKey", "404", "NotFound"}


class S3BlobStore(BlobStorePort):
    def __init__(self, bucket: str | None = AWS_S3_BUCKET, prefix: str = "", client=None):
        if not bucket:
            raise ValueError("AWS_S3_BUCKET is required for the s3 blob store")
        self.bucket = bucket
        self.prefix = prefix
        self.client = client or get_s3_client()

    def get(self, key: str) -> str | None:
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=build_s3_key(self.prefix, key))
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in _MISSING_KEY_CODES:
                return None
            raise RuntimeError(f"S3 blob read failed ({key}): {exc}") from exc
        except BotoCoreError as exc:
            raise RuntimeError(f"S3 blob read failed ({key}): {exc}") from exc
        return response["Body"].read().decode("utf-8")

    def set(self, key: str, content: str) -> None:
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=build_s3_key(self.prefix, key),
                Body=content.encode("utf-8"),
                ContentType="application/json; charset=utf-8",
            )
        except (ClientError, BotoCoreError) as exc:
            raise RuntimeError(f"S3 blob write failed ({key}): {exc}") from exc
