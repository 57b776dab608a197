"""Tests for SSM utility."""

from unittest.mock import Mock, patch

import pytest
from botocore.exceptions import ClientError

from util import ssm


@pytest.fixture(autouse=True)
def clear_ssm():
    ssm._clear_client()
    yield
    ssm._clear_client()


@pytest.fixture
def ssm_client():
    client = Mock()
    with patch("util.ssm.boto3.client", return_value=client):
        yield client


@patch("util.ssm.boto3.client")
def test_client_is_created_once(mock_boto_client):
    assert ssm.get_ssm_client() is ssm.get_ssm_client()
    mock_boto_client.assert_called_once_with("ssm")


def test_parameter_name():
    assert ssm.parameter_name("prod", "cwa-auth-key") == "prod-cwa-auth-key"


def test_read_secret_decrypts_and_caches(ssm_client):
    ssm_client.get_parameter.return_value = {"Parameter": {"Value": "secret"}}

    assert ssm.read_secret("prod", "cwa-auth-key") == "secret"
    assert ssm.read_secret("prod", "cwa-auth-key") == "secret"

    ssm_client.get_parameter.assert_called_once_with(
        Name="prod-cwa-auth-key", WithDecryption=True
    )


def test_missing_parameter_reads_as_none(ssm_client):
    ssm_client.get_parameter.side_effect = ClientError(
        {"Error": {"Code": "ParameterNotFound", "Message": "not found"}},
        "GetParameter",
    )

    with patch("util.ssm.logger") as mock_logger:
        assert ssm.read_secret("prod", "google-maps-api-key") is None

    mock_logger.warning.assert_called_once()
