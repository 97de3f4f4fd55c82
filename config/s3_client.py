import os
import boto3

AWS_REGION = os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION")
AWS_S3_BUCKET = os.getenv("AWS_S3_BUCKET")


def get_s3_client():
    return boto3.client(
        "s3",
        region_name=AWS_REGION,
        aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID"),
        aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY"),
    )


def build_s3_key(prefix: str, key: str) -> str:
    """Blob keys live under an optional folder-like prefix inside the bucket."""
    prefix = (prefix or "").strip("/")
    return f"{prefix}/{key}" if prefix else key
