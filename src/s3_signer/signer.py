import configparser
import datetime as dt
import logging
import os
import pathlib
from collections.abc import Mapping
from typing import Self

from .auth import AWSSignatureV4
from .exceptions import InvalidInputError
from .models import (
    DEFAULT_REGION,
    DEFAULT_VALIDITY_MINUTES,
    ServiceLocation,
    SigningDetails,
    SigningRequest,
    SignResult,
)
from .urlparsing import normalize_endpoint
from .validation import (
    validate_bucket_name,
    validate_credentials,
    validate_extra_query_param,
    validate_object_key,
    validate_region,
    validate_validity_minutes,
)

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


class Signer:
    """Generates presigned S3 object URLs for one account and endpoint.

    Configuration is validated when it is set. Every signing call snapshots it
    into immutable values, so changing the configuration never affects a
    signing operation that already started.

    Path-style URLs look like ``https://s3.amazonaws.com/BUCKET/KEY`` and
    virtual-hosted style URLs like ``https://BUCKET.s3.amazonaws.com/KEY``.
    Path style is the default as it works with any bucket name and with most
    S3-compatible services. Cloudflare R2 uses ``auto`` as its region.
    """

    def __init__(
        self,
        access_key: str,
        secret_key: str,
        endpoint: str,
        region: str = DEFAULT_REGION,
        use_path_style: bool = True,
        extra_query_param: str = "",
    ):
        self._credentials = validate_credentials(access_key, secret_key)
        self._auth = AWSSignatureV4(self._credentials)
        self._endpoint = normalize_endpoint(endpoint)
        self._region = validate_region(region)
        self._use_path_style = bool(use_path_style)
        self._extra_query_param = validate_extra_query_param(extra_query_param)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(access_key={self.access_key!r}, "
            f"endpoint={self._endpoint!r}, region={self._region!r}, "
            f"use_path_style={self._use_path_style!r})"
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Self:
        if environ is None:
            environ = os.environ

        access_key = environ.get("AWS_ACCESS_KEY_ID")
        secret_key = environ.get("AWS_SECRET_ACCESS_KEY")
        if not access_key or not secret_key:
            raise InvalidInputError(
                "AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY must be set",
                field="credentials",
            )

        region = (
            environ.get("AWS_REGION")
            or environ.get("AWS_DEFAULT_REGION")
            or DEFAULT_REGION
        )
        endpoint = environ.get("AWS_ENDPOINT_URL") or f"s3.{region}.amazonaws.com"
        path_style = environ.get("S3_SIGNER_PATH_STYLE", "true").strip().lower()
        if path_style not in _TRUTHY | _FALSY:
            raise InvalidInputError(
                f"S3_SIGNER_PATH_STYLE must be one of "
                f"{sorted(_TRUTHY | _FALSY)}, got {path_style!r}",
                field="use_path_style",
            )
        use_path_style = path_style in _TRUTHY
        return cls(access_key, secret_key, endpoint, region, use_path_style)

    @classmethod
    def from_aws_config(
        cls,
        profile_name: str = "default",
        config_path: str | pathlib.Path | None = None,
        credentials_path: str | pathlib.Path | None = None,
    ) -> Self:
        if config_path is None:
            config_path = pathlib.Path.home() / ".aws" / "config"
        else:
            config_path = pathlib.Path(config_path)

        if credentials_path is None:
            credentials_path = pathlib.Path.home() / ".aws" / "credentials"
        else:
            credentials_path = pathlib.Path(credentials_path)

        config = configparser.ConfigParser()
        credentials = configparser.ConfigParser()

        # Config file may or may not exist
        config_data = {}
        if config_path.exists():
            config.read(config_path)
            # config uses "profile <name>" sections, except for default
            config_section = (
                profile_name if profile_name == "default" else f"profile {profile_name}"
            )
            if config_section in config:
                config_data = dict(config[config_section])

        credentials_data = {}
        if credentials_path.exists():
            credentials.read(credentials_path)
            if profile_name in credentials:
                credentials_data = dict(credentials[profile_name])

        # credentials file takes precedence over config
        access_key = credentials_data.get("aws_access_key_id") or config_data.get(
            "aws_access_key_id"
        )
        secret_key = credentials_data.get("aws_secret_access_key") or config_data.get(
            "aws_secret_access_key"
        )

        if not access_key:
            raise InvalidInputError(
                f"aws_access_key_id not found for profile '{profile_name}' "
                f"in config or credentials files",
                field="access_key",
            )
        if not secret_key:
            raise InvalidInputError(
                f"aws_secret_access_key not found for profile '{profile_name}' "
                f"in config or credentials files",
                field="secret_key",
            )

        region = (
            credentials_data.get("region")
            or config_data.get("region")
            or os.environ.get("AWS_DEFAULT_REGION")
            or DEFAULT_REGION
        )

        s3_section = _parse_nested_section(config_data.get("s3", ""))
        endpoint_url = (
            credentials_data.get("endpoint_url")
            or config_data.get("endpoint_url")
            or s3_section.get("endpoint_url")
            or f"s3.{region}.amazonaws.com"
        )
        use_path_style = s3_section.get("addressing_style", "path") != "virtual"

        logger.debug(
            "Loaded profile '%s' from %s (region %s, endpoint %s)",
            profile_name,
            config_path,
            region,
            endpoint_url,
        )
        return cls(access_key, secret_key, endpoint_url, region, use_path_style)

    @property
    def access_key(self) -> str:
        return self._credentials.access_key_id

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def region(self) -> str:
        return self._region

    @property
    def use_path_style(self) -> bool:
        return self._use_path_style

    @property
    def extra_query_param(self) -> str:
        return self._extra_query_param

    @property
    def location(self) -> ServiceLocation:
        return ServiceLocation(self._endpoint, self._region, self._use_path_style)

    def set_credentials(self, access_key: str, secret_key: str) -> None:
        self._credentials = validate_credentials(access_key, secret_key)
        self._auth = AWSSignatureV4(self._credentials)
        logger.debug("Credentials set for access key %s", self.access_key)

    def set_endpoint(self, endpoint: str) -> None:
        self._endpoint = normalize_endpoint(endpoint)
        logger.debug("Endpoint set to %s", self._endpoint)

    def set_region(self, region: str) -> None:
        self._region = validate_region(region)
        logger.debug("Region set to %s", self._region)

    def set_use_path_style(self, use_path_style: bool) -> None:
        self._use_path_style = bool(use_path_style)
        logger.debug("Path-style URLs %s", "on" if self._use_path_style else "off")

    def set_extra_query_param(self, name: str) -> None:
        self._extra_query_param = validate_extra_query_param(name)
        logger.debug("Extra query parameter set to %r", self._extra_query_param)

    def _build_request(
        self,
        bucket: str,
        object_key: str,
        validity_minutes: int,
        timestamp: dt.datetime | None,
    ) -> SigningRequest:
        return SigningRequest(
            bucket=validate_bucket_name(bucket, self._use_path_style),
            object_key=validate_object_key(object_key),
            validity_minutes=validate_validity_minutes(validity_minutes),
            extra_query_param=self._extra_query_param,
            timestamp=timestamp,
        )

    def get_signing_details(
        self,
        bucket: str,
        object_key: str,
        validity_minutes: int = DEFAULT_VALIDITY_MINUTES,
        timestamp: dt.datetime | None = None,
    ) -> SigningDetails:
        request = self._build_request(bucket, object_key, validity_minutes, timestamp)
        return self._auth.sign(self.location, request)

    def get_object_url(
        self,
        bucket: str,
        object_key: str,
        validity_minutes: int = DEFAULT_VALIDITY_MINUTES,
        timestamp: dt.datetime | None = None,
    ) -> str:
        """Returns a presigned GET URL for ``object_key`` in ``bucket``.

        ``validity_minutes`` is how long the URL stays usable. ``timestamp``
        pins the signing time and defaults to now.

        Raises InvalidInputError if the bucket or key is empty or invalid.
        """
        return self.get_signing_details(
            bucket, object_key, validity_minutes, timestamp
        ).url

    def try_get_object_url(
        self,
        bucket: str,
        object_key: str,
        validity_minutes: int = DEFAULT_VALIDITY_MINUTES,
        timestamp: dt.datetime | None = None,
    ) -> SignResult:
        try:
            url = self.get_object_url(bucket, object_key, validity_minutes, timestamp)
        except InvalidInputError as e:
            return SignResult.failure(e)
        return SignResult.success(url)


def _parse_nested_section(value: str) -> dict[str, str]:
    """Parses an indented AWS config sub-section such as ``s3 =``."""
    nested = {}
    for line in value.splitlines():
        name, sep, setting = line.partition("=")
        if sep:
            nested[name.strip()] = setting.strip()
    return nested
