"""
zvlib.aws_client — FIPS-aware boto3 client factory and partition utilities.

Route 53 is a global service whose API lives in the partition's home region,
so clients for it are built against us-east-1 (or us-gov-west-1 in GovCloud).
GovCloud clients automatically get FIPS endpoints.

Imports from zvlib.config only. Zero dependency on utils.py.
"""

import logging
from typing import Optional, Tuple

import boto3
from botocore.config import Config

from zvlib.config import config_value

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Partition detection
# ---------------------------------------------------------------------------


def detect_partition(region_name: Optional[str] = None) -> str:
    """
    Detect AWS partition from region or credentials.

    Args:
        region_name: Optional region to check

    Returns:
        str: 'aws' or 'aws-us-gov'
    """
    if region_name:
        if region_name.startswith("us-gov"):
            return "aws-us-gov"
        return "aws"

    try:
        session = boto3.Session()

        region = session.region_name or "us-east-1"
        if region.startswith("us-gov"):
            return "aws-us-gov"

        sts = session.client("sts")
        arn = sts.get_caller_identity()["Arn"]
        if "aws-us-gov" in arn:
            return "aws-us-gov"

        return "aws"
    except Exception as e:
        logger.warning("Could not detect partition: %s, assuming commercial AWS", e)
        return "aws"


def get_partition_default_region(partition: Optional[str] = None) -> str:
    """
    Get the home region for a partition, used for global services.

    Args:
        partition: AWS partition ('aws' or 'aws-us-gov')
                  If not provided, auto-detects from current credentials

    Returns:
        str: Home region for the partition
    """
    if partition is None:
        partition = detect_partition()

    if partition == "aws-us-gov":
        return "us-gov-west-1"
    return "us-east-1"


# ---------------------------------------------------------------------------
# Session and client factory
# ---------------------------------------------------------------------------


def get_aws_session(region_name: Optional[str] = None):
    """
    Create a boto3 session for the specified region.

    Args:
        region_name: AWS region (None = default from environment)

    Returns:
        boto3.Session: Configured session
    """
    return boto3.Session(region_name=region_name)


def get_boto3_client(service: str, region_name: Optional[str] = None, **kwargs):
    """
    Create boto3 client with standard configuration including retries.

    Automatically injects ``use_fips_endpoint=True`` for GovCloud regions
    (``us-gov-west-1``, ``us-gov-east-1``).

    Args:
        service: AWS service name (e.g., 'route53', 's3')
        region_name: AWS region name (optional)
        **kwargs: Additional arguments to pass to client creation

    Returns:
        boto3.client: Configured boto3 client with retry logic
    """
    sdk_config = config_value("aws_sdk_config", default={}) or {}

    retry_config = sdk_config.get("retries", {"max_attempts": 5, "mode": "adaptive"})
    connect_timeout = sdk_config.get("connect_timeout", 10)
    read_timeout = sdk_config.get("read_timeout", 60)

    config = Config(
        retries=retry_config,
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
    )

    # GovCloud requires FIPS endpoints
    if region_name and region_name.startswith("us-gov-") and "use_fips_endpoint" not in kwargs:
        kwargs["use_fips_endpoint"] = True

    session = get_aws_session(region_name)
    return session.client(service, config=config, **kwargs)


def get_route53_client(partition: Optional[str] = None):
    """Return a Route 53 client bound to the partition's home region."""
    return get_boto3_client("route53", region_name=get_partition_default_region(partition))


def get_s3_client(region_name: Optional[str] = None):
    """Return an S3 client; head_bucket/upload_file follow bucket-region redirects."""
    return get_boto3_client("s3", region_name=region_name)


# ---------------------------------------------------------------------------
# Credential validation
# ---------------------------------------------------------------------------


def validate_aws_credentials() -> Tuple[bool, Optional[str], Optional[str]]:
    """
    Validate AWS credentials.

    Returns:
        tuple: (is_valid, account_id, error_message)
    """
    try:
        sts = get_boto3_client("sts")
        response = sts.get_caller_identity()
        return True, response["Account"], None
    except Exception as e:
        return False, None, str(e)
