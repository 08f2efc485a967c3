"""
Test fixtures for Lambda function tests.

Provides common test data and mocked AWS resources.
"""

import os
from typing import Any, Dict, Generator

import boto3
import pytest
from moto import mock_aws

from src.utils.dynamodb import clear_all_overrides
from tests.unit.table_schemas import EVENTS_TABLE_NAME, VENUES_TABLE_NAME, create_all_tables


@pytest.fixture(autouse=True)
def reset_table_overrides() -> Generator[None, None, None]:
    """Make sure no test leaks a table override into the next one."""
    yield
    clear_all_overrides()


@pytest.fixture
def aws_credentials() -> None:
    """Set fake AWS credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
    os.environ["EVENTS_TABLE_NAME"] = EVENTS_TABLE_NAME
    os.environ["VENUES_TABLE_NAME"] = VENUES_TABLE_NAME
    os.environ.pop("DYNAMODB_ENDPOINT", None)


@pytest.fixture
def dynamodb_tables(aws_credentials: None) -> Generator[Dict[str, Any], None, None]:
    """Create the mock events and venues tables."""
    with mock_aws():
        dynamodb = boto3.resource("dynamodb", region_name="us-east-1")
        yield create_all_tables(dynamodb)


@pytest.fixture
def events_table(dynamodb_tables: Dict[str, Any]) -> Any:
    return dynamodb_tables["events"]


@pytest.fixture
def venues_table(dynamodb_tables: Dict[str, Any]) -> Any:
    return dynamodb_tables["venues"]


@pytest.fixture
def lambda_context() -> Any:
    """Mock Lambda context object."""

    class MockContext:
        function_name = "test-function"
        memory_limit_in_mb = 128
        invoked_function_arn = "arn:aws:lambda:us-east-1:123456789012:function:test"
        aws_request_id = "test-request-id"

    return MockContext()


@pytest.fixture
def api_gateway_event() -> Dict[str, Any]:
    """Bare API Gateway proxy event; tests fill in parameters."""
    return {
        "path": "/events",
        "httpMethod": "GET",
        "headers": {"X-Correlation-Id": "corr-123"},
        "pathParameters": None,
        "queryStringParameters": None,
        "requestContext": {"requestId": "req-123"},
    }
