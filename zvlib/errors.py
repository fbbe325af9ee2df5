"""
zvlib.errors — Standardized AWS error handling.

Wraps boto3/botocore failures in AwsOperationError, which carries a typed
Outcome instead of a message string, so callers can tell "the service said no"
apart from "the service could not be reached".
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from boto3.exceptions import Boto3Error
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    EndpointConnectionError,
    NoCredentialsError,
    ParamValidationError,
)

from zvlib.results import Outcome

logger = logging.getLogger(__name__)


class AwsOperationError(Exception):
    """An AWS call failed; ``outcome`` says how."""

    def __init__(
        self,
        operation_name: str,
        outcome: Outcome,
        message: str,
        code: Optional[str] = None,
    ):
        super().__init__(f"{operation_name}: {message}")
        self.operation_name = operation_name
        self.outcome = outcome
        self.message = message
        self.code = code


def classify_aws_error(operation_name: str, error: Exception) -> AwsOperationError:
    """
    Map a boto3/botocore exception onto an AwsOperationError.

    Args:
        operation_name: Human-readable operation description
        error: The exception raised by the SDK

    Returns:
        AwsOperationError: Typed error (not raised)
    """
    if isinstance(error, NoCredentialsError):
        return AwsOperationError(
            operation_name,
            Outcome.UNREACHABLE,
            "No AWS credentials found. Configure credentials using "
            "'aws configure' or environment variables.",
            code="NoCredentials",
        )

    if isinstance(error, ClientError):
        err = error.response.get("Error", {})
        return AwsOperationError(
            operation_name,
            Outcome.CALL_FAILED,
            err.get("Message") or str(error),
            code=err.get("Code", "Unknown"),
        )

    if isinstance(error, ParamValidationError):
        # Raised client-side before any request is sent
        return AwsOperationError(
            operation_name, Outcome.INVALID_INPUT, str(error), code="ParamValidationError"
        )

    if isinstance(error, EndpointConnectionError):
        return AwsOperationError(
            operation_name, Outcome.UNREACHABLE, str(error), code="EndpointConnectionError"
        )

    if isinstance(error, BotoCoreError):
        return AwsOperationError(
            operation_name, Outcome.UNREACHABLE, str(error), code=type(error).__name__
        )

    # S3UploadFailedError and friends: the transfer reached S3 and was refused
    return AwsOperationError(
        operation_name, Outcome.CALL_FAILED, str(error), code=type(error).__name__
    )


@contextmanager
def aws_operation(operation_name: str) -> Iterator[None]:
    """
    Context manager for AWS calls with standardized error logging.

    Any SDK exception raised inside the block is logged and re-raised as
    AwsOperationError. Non-SDK exceptions propagate untouched.

    Example:
        with aws_operation("Listing hosted zones"):
            for page in route53.get_paginator("list_hosted_zones").paginate():
                ...
    """
    try:
        yield
    except (BotoCoreError, ClientError, Boto3Error) as e:
        typed = classify_aws_error(operation_name, e)
        if typed.code and typed.outcome is Outcome.CALL_FAILED:
            logger.error("%s: AWS error [%s]: %s", operation_name, typed.code, typed.message)
        else:
            logger.error("%s: %s", operation_name, typed.message)
        logger.debug("Exception details: %s", e, exc_info=True)
        raise typed from e
