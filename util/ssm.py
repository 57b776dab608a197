"""Deployed secrets from AWS SSM Parameter Store."""

import logging
from functools import lru_cache
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)

_client = None


def get_ssm_client():
    """Get the SSM client (lazy initialization, shared by all tools)."""
    global _client
    if _client is None:
        _client = boto3.client("ssm")
    return _client


def parameter_name(environment: str, key: str) -> str:
    """Secrets are stored per deployment as "<environment>-<key>", e.g. prod-cwa-auth-key."""
    return f"{environment}-{key}"


@lru_cache(maxsize=32)
def read_secret(environment: str, key: str) -> Optional[str]:
    """
    Decrypt one secret of a deployment environment.

    A missing parameter or an AWS failure is logged and read as None, so the
    tool needing the secret reports it as not configured. Results, including
    misses, are cached for the life of the process.
    """
    name = parameter_name(environment, key)
    try:
        response = get_ssm_client().get_parameter(Name=name, WithDecryption=True)
    except (BotoCoreError, ClientError) as e:
        logger.warning("Could not read SSM parameter '%s': %s", name, e)
        return None
    return response["Parameter"]["Value"]


def _clear_client():
    """Clear the cached client and secrets (for testing only)."""
    global _client
    _client = None
    read_secret.cache_clear()
