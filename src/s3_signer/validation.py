"""Checks applied to configuration and request values before signing.

The signing core only re-checks that bucket and key are non-empty; everything
here runs in :class:`~s3_signer.signer.Signer` so that a malformed value is
rejected where it is supplied.
"""

import re

from .exceptions import InvalidInputError
from .models import Credentials
from .urlparsing import is_valid_s3_bucket_subdomain

# SigV4 presigned URLs are capped at 7 days by S3 and R2
MAX_VALIDITY_MINUTES = 7 * 24 * 60
MAX_OBJECT_KEY_BYTES = 1024

_ACCESS_KEY_RE = re.compile(r"^[A-Za-z0-9_.\-]{3,128}$")
_REGION_RE = re.compile(r"^[a-z0-9-]+$")
_LEGACY_BUCKET_RE = re.compile(r"^[A-Za-z0-9._-]{1,255}$")
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")
_QUERY_PARAM_NAME_RE = re.compile(r"^[A-Za-z0-9._~-]+$")


def validate_credentials(access_key: str, secret_key: str) -> Credentials:
    access_key = (access_key or "").strip()
    secret_key = (secret_key or "").strip()

    if not access_key or not secret_key:
        raise InvalidInputError(
            "Invalid arguments provided. Access Key and Secret Key are mandatory.",
            field="credentials",
        )
    if not _ACCESS_KEY_RE.match(access_key):
        raise InvalidInputError(
            "Access Key must be 3-128 letters, digits, dots, underscores or hyphens.",
            field="access_key",
        )
    return Credentials(access_key, secret_key)


def validate_region(region: str) -> str:
    region = (region or "").strip()
    if not region:
        raise InvalidInputError("Region is mandatory.", field="region")
    if not _REGION_RE.match(region):
        raise InvalidInputError(
            f"Invalid region '{region}'. "
            "Use lowercase letters, digits and '-' (e.g. 'us-east-1' or 'auto').",
            field="region",
        )
    return region


def validate_bucket_name(bucket: str, use_path_style: bool) -> str:
    bucket = (bucket or "").strip()
    if not bucket:
        raise InvalidInputError(
            "The bucket name provided is empty or invalid.", field="bucket"
        )

    if use_path_style:
        valid = bool(_LEGACY_BUCKET_RE.match(bucket))
    else:
        # the bucket becomes a DNS label in virtual-hosted style
        valid = is_valid_s3_bucket_subdomain(bucket)

    if not valid:
        style = "path-style" if use_path_style else "virtual-hosted style"
        raise InvalidInputError(
            f"Invalid bucket name '{bucket}' for {style} URLs.", field="bucket"
        )
    return bucket


def validate_object_key(object_key: str) -> str:
    object_key = object_key or ""
    if not object_key.strip():
        raise InvalidInputError(
            "The object name provided is empty or invalid.", field="object_key"
        )
    if _CONTROL_CHARS_RE.search(object_key):
        raise InvalidInputError(
            "Object key must not contain control characters.", field="object_key"
        )
    if len(object_key.encode("utf-8")) > MAX_OBJECT_KEY_BYTES:
        raise InvalidInputError(
            f"Object key is longer than {MAX_OBJECT_KEY_BYTES} bytes.",
            field="object_key",
        )
    return object_key


def validate_validity_minutes(minutes: int) -> int:
    if isinstance(minutes, bool) or not isinstance(minutes, int):
        raise InvalidInputError(
            f"Validity must be an integer number of minutes, got {minutes!r}.",
            field="validity_minutes",
        )
    if minutes < 1:
        raise InvalidInputError(
            "Validity must be a positive integer.", field="validity_minutes"
        )
    if minutes > MAX_VALIDITY_MINUTES:
        raise InvalidInputError(
            f"Validity must not exceed {MAX_VALIDITY_MINUTES} minutes (7 days).",
            field="validity_minutes",
        )
    return minutes


def validate_extra_query_param(name: str) -> str:
    # appended verbatim as "&{name}=", so it must not break the query string
    name = (name or "").strip()
    if name and not _QUERY_PARAM_NAME_RE.match(name):
        raise InvalidInputError(
            f"Invalid extra query parameter name '{name}'.",
            field="extra_query_param",
        )
    return name
