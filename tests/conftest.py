import datetime as dt

import pytest

from s3_signer import Credentials, ServiceLocation, Signer
from s3_signer.auth import AWSSignatureV4


@pytest.fixture
def fixed_time():
    return dt.datetime(2024, 1, 1, 0, 0, 0, tzinfo=dt.UTC)


@pytest.fixture
def credentials():
    return Credentials(access_key_id="AKIDEXAMPLE", secret_access_key="secret")


@pytest.fixture
def auth(credentials):
    return AWSSignatureV4(credentials)


@pytest.fixture
def path_style():
    return ServiceLocation(endpoint_host="s3.amazonaws.com", region="us-west-1")


@pytest.fixture
def virtual_hosted():
    return ServiceLocation(
        endpoint_host="s3.amazonaws.com", region="us-west-1", use_path_style=False
    )


@pytest.fixture
def signer():
    return Signer(
        access_key="AKIDEXAMPLE",
        secret_key="secret",
        endpoint="s3.amazonaws.com",
        region="us-west-1",
    )


@pytest.fixture
def mock_datetime(monkeypatch):
    mock_now = dt.datetime(2023, 1, 1, 12, 0, 0, tzinfo=dt.UTC)

    class MockDatetime:
        @staticmethod
        def now(tz=None):
            return mock_now

    class MockDt:
        datetime = MockDatetime
        UTC = dt.UTC

    monkeypatch.setattr("s3_signer.auth.dt", MockDt)
    return mock_now
