"""Immutable value types passed through a signing operation."""

import datetime as dt
from dataclasses import dataclass, field

from .exceptions import InvalidInputError

DEFAULT_REGION = "us-west-1"
DEFAULT_VALIDITY_MINUTES = 5


@dataclass(frozen=True)
class Credentials:
    access_key_id: str
    secret_access_key: str = field(repr=False)


@dataclass(frozen=True)
class ServiceLocation:
    endpoint_host: str
    region: str = DEFAULT_REGION
    use_path_style: bool = True


@dataclass(frozen=True)
class SigningRequest:
    bucket: str
    object_key: str
    validity_minutes: int = DEFAULT_VALIDITY_MINUTES
    extra_query_param: str = ""
    # None means "now", captured once when signing starts
    timestamp: dt.datetime | None = None


@dataclass(frozen=True)
class SigningDetails:
    url: str
    canonical_request: str
    string_to_sign: str
    signature: str
    credential_scope: str
    amz_date: str


@dataclass(frozen=True)
class SignResult:
    """Outcome of a non-raising signing call: either a URL or the error."""

    url: str | None = None
    error: InvalidInputError | None = None

    @classmethod
    def success(cls, url: str) -> "SignResult":
        return cls(url=url)

    @classmethod
    def failure(cls, error: InvalidInputError) -> "SignResult":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> str:
        if self.error is not None:
            raise self.error
        assert self.url is not None
        return self.url
