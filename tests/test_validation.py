import pytest

from s3_signer.exceptions import InvalidInputError
from s3_signer.validation import (
    MAX_VALIDITY_MINUTES,
    validate_bucket_name,
    validate_credentials,
    validate_extra_query_param,
    validate_object_key,
    validate_region,
    validate_validity_minutes,
)


def test_validate_credentials_trims():
    credentials = validate_credentials(" AKIDEXAMPLE ", " secret\n")
    assert credentials.access_key_id == "AKIDEXAMPLE"
    assert credentials.secret_access_key == "secret"


@pytest.mark.parametrize(
    "access_key,secret_key",
    [("", "secret"), ("AKIDEXAMPLE", ""), ("  ", "secret"), (None, "secret")],
)
def test_validate_credentials_missing(access_key, secret_key):
    with pytest.raises(InvalidInputError) as exc_info:
        validate_credentials(access_key, secret_key)
    assert exc_info.value.field == "credentials"


@pytest.mark.parametrize("access_key", ["AK", "AKID EXAMPLE", "AKID/EXAMPLE", "a" * 129])
def test_validate_credentials_bad_access_key(access_key):
    with pytest.raises(InvalidInputError) as exc_info:
        validate_credentials(access_key, "secret")
    assert exc_info.value.field == "access_key"


@pytest.mark.parametrize("region", ["us-west-1", "eu-central-1", "auto", "nyc3"])
def test_validate_region(region):
    assert validate_region(region) == region


@pytest.mark.parametrize("region", ["", "  ", "US-WEST-1", "us_west_1", "us/west"])
def test_validate_region_invalid(region):
    with pytest.raises(InvalidInputError) as exc_info:
        validate_region(region)
    assert exc_info.value.field == "region"


def test_validate_bucket_name_path_style_allows_legacy_names():
    assert validate_bucket_name("My_Legacy.Bucket", use_path_style=True) == (
        "My_Legacy.Bucket"
    )


def test_validate_bucket_name_virtual_hosted_requires_dns_name():
    assert validate_bucket_name(" my-bucket ", use_path_style=False) == "my-bucket"
    with pytest.raises(InvalidInputError, match="virtual-hosted"):
        validate_bucket_name("My_Legacy.Bucket", use_path_style=False)


@pytest.mark.parametrize("bucket", ["", "   ", "bucket/name", "a" * 256])
def test_validate_bucket_name_invalid(bucket):
    with pytest.raises(InvalidInputError) as exc_info:
        validate_bucket_name(bucket, use_path_style=True)
    assert exc_info.value.field == "bucket"


def test_validate_object_key():
    assert validate_object_key("photos/2024/cat.jpg") == "photos/2024/cat.jpg"
    # surrounding spaces are part of the key
    assert validate_object_key("report.pdf ") == "report.pdf "
    assert validate_object_key(" leading.txt") == " leading.txt"
    assert validate_object_key("x" * 1024) == "x" * 1024


@pytest.mark.parametrize("key", ["", "  ", "bad\x00key", "tab\tinside", "x" * 1025])
def test_validate_object_key_invalid(key):
    with pytest.raises(InvalidInputError) as exc_info:
        validate_object_key(key)
    assert exc_info.value.field == "object_key"


def test_validate_object_key_counts_bytes():
    # 512 two-byte characters is 1024 bytes
    assert validate_object_key("é" * 512)
    with pytest.raises(InvalidInputError):
        validate_object_key("é" * 513)


@pytest.mark.parametrize("minutes", [1, 5, 60, MAX_VALIDITY_MINUTES])
def test_validate_validity_minutes(minutes):
    assert validate_validity_minutes(minutes) == minutes


@pytest.mark.parametrize(
    "minutes", [0, -1, MAX_VALIDITY_MINUTES + 1, True, 2.5, "5", None]
)
def test_validate_validity_minutes_invalid(minutes):
    with pytest.raises(InvalidInputError) as exc_info:
        validate_validity_minutes(minutes)
    assert exc_info.value.field == "validity_minutes"


@pytest.mark.parametrize(
    "name", ["", "response-content-disposition", "x-id", "token_1.v2"]
)
def test_validate_extra_query_param(name):
    assert validate_extra_query_param(name) == name


@pytest.mark.parametrize("name", ["a=b", "a&b", "with space", "q?", "frag#"])
def test_validate_extra_query_param_invalid(name):
    with pytest.raises(InvalidInputError) as exc_info:
        validate_extra_query_param(name)
    assert exc_info.value.field == "extra_query_param"
