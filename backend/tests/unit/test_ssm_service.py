"""Unit tests for SSMService against moto's Parameter Store."""

from typing import Generator

import boto3
import pytest
from moto import mock_aws

from staybook.services.ssm_service import SSMService, SSMServiceError, stripe_parameter_name

SECRET_PATH = "/staybook/test/stripe/secret_key"


@pytest.fixture
def ssm_client() -> Generator:
    with mock_aws():
        client = boto3.client("ssm", region_name="eu-west-1")
        client.put_parameter(Name=SECRET_PATH, Value="sk_test_from_ssm", Type="SecureString")
        yield client


class TestGetParameter:
    def test_reads_secure_string(self, ssm_client):
        assert SSMService(ssm_client).get_parameter(SECRET_PATH) == "sk_test_from_ssm"

    def test_value_is_fetched_once_per_instance(self, ssm_client):
        ssm = SSMService(ssm_client)
        ssm.get_parameter(SECRET_PATH)
        ssm_client.delete_parameter(Name=SECRET_PATH)

        assert ssm.get_parameter(SECRET_PATH) == "sk_test_from_ssm"

    def test_new_instance_sees_rotated_value(self, ssm_client):
        SSMService(ssm_client).get_parameter(SECRET_PATH)
        ssm_client.put_parameter(
            Name=SECRET_PATH, Value="sk_test_rotated", Type="SecureString", Overwrite=True
        )

        assert SSMService(ssm_client).get_parameter(SECRET_PATH) == "sk_test_rotated"

    def test_missing_parameter_raises(self, ssm_client):
        with pytest.raises(SSMServiceError, match="parameter not found"):
            SSMService(ssm_client).get_parameter("/staybook/test/stripe/webhook_secret")

    def test_default_client(self, ssm_client):
        assert SSMService().get_parameter(SECRET_PATH) == "sk_test_from_ssm"


def test_stripe_parameter_name():
    assert stripe_parameter_name("prod", "webhook_secret") == "/staybook/prod/stripe/webhook_secret"
