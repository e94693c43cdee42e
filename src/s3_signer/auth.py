"""AWS Signature Version 4 query-string signing for S3 object URLs."""

import datetime as dt
import hashlib
import hmac
import logging
import urllib.parse

from .exceptions import InvalidInputError
from .models import Credentials, ServiceLocation, SigningDetails, SigningRequest
from .urlparsing import (
    build_object_url,
    canonical_resource_path,
    encode_object_key,
    host_header,
)

logger = logging.getLogger(__name__)

ALGORITHM = "AWS4-HMAC-SHA256"
SERVICE = "s3"
TERMINATOR = "aws4_request"
UNSIGNED_PAYLOAD = "UNSIGNED-PAYLOAD"
SIGNED_HEADERS = "host"


class AWSSignatureV4:
    """Builds presigned ``GET`` URLs from a credential pair.

    Holds no per-request state: every call receives the service location and
    the request as immutable values, so one instance can be shared freely.
    """

    def __init__(self, credentials: Credentials):
        self.credentials = credentials

    def _sha256_hash(self, data: bytes) -> str:
        return hashlib.sha256(data).hexdigest()

    def _hmac_sha256(self, key: bytes, data: str) -> bytes:
        return hmac.new(key, data.encode("utf-8"), hashlib.sha256).digest()

    def _get_signature_key(self, date_stamp: str, region: str) -> bytes:
        secret = self.credentials.secret_access_key
        k_date = self._hmac_sha256(f"AWS4{secret}".encode(), date_stamp)
        k_region = self._hmac_sha256(k_date, region)
        k_service = self._hmac_sha256(k_region, SERVICE)
        k_signing = self._hmac_sha256(k_service, TERMINATOR)
        return k_signing

    @staticmethod
    def _credential_scope(date_stamp: str, region: str) -> str:
        return f"{date_stamp}/{region}/{SERVICE}/{TERMINATOR}"

    def _create_query_string(
        self,
        credential_scope: str,
        amz_date: str,
        expires_seconds: int,
        extra_query_param: str = "",
    ) -> str:
        # The order is fixed: the canonical request embeds this string verbatim
        credential = urllib.parse.quote_plus(
            f"{self.credentials.access_key_id}/{credential_scope}", safe=""
        )
        query_string = "&".join(
            [
                f"X-Amz-Algorithm={ALGORITHM}",
                f"X-Amz-Credential={credential}",
                f"X-Amz-Date={amz_date}",
                f"X-Amz-Expires={expires_seconds}",
                f"X-Amz-SignedHeaders={SIGNED_HEADERS}",
            ]
        )
        if extra_query_param:
            query_string += f"&{extra_query_param}="
        return query_string

    def _create_canonical_request(
        self,
        resource_path: str,
        query_string: str,
        host: str,
    ) -> str:
        # the empty line closes the canonical headers block
        return "\n".join(
            [
                "GET",
                resource_path,
                query_string,
                f"host:{host}",
                "",
                SIGNED_HEADERS,
                UNSIGNED_PAYLOAD,
            ]
        )

    def _create_string_to_sign(
        self,
        amz_date: str,
        credential_scope: str,
        canonical_request: str,
    ) -> str:
        return "\n".join(
            [
                ALGORITHM,
                amz_date,
                credential_scope,
                self._sha256_hash(canonical_request.encode("utf-8")),
            ]
        )

    def sign(
        self, location: ServiceLocation, request: SigningRequest
    ) -> SigningDetails:
        now = _to_utc(request.timestamp)

        bucket = request.bucket.strip()
        object_key = request.object_key
        if not bucket:
            raise InvalidInputError(
                "The bucket name provided is empty or invalid.", field="bucket"
            )
        # keys may start or end with spaces; only an all-blank key is rejected
        if not object_key.strip():
            raise InvalidInputError(
                "The object name provided is empty or invalid.", field="object_key"
            )
        validity = request.validity_minutes
        if isinstance(validity, bool) or not isinstance(validity, int) or validity < 1:
            raise InvalidInputError(
                f"Validity must be a positive number of minutes, got {validity!r}.",
                field="validity_minutes",
            )

        encoded_key = encode_object_key(object_key)
        expires_seconds = validity * 60
        amz_date = now.strftime("%Y%m%dT%H%M%SZ")
        date_stamp = now.strftime("%Y%m%d")
        credential_scope = self._credential_scope(date_stamp, location.region)

        base_url = build_object_url(
            location.endpoint_host, bucket, encoded_key, location.use_path_style
        )
        query_string = self._create_query_string(
            credential_scope, amz_date, expires_seconds, request.extra_query_param
        )
        canonical_request = self._create_canonical_request(
            resource_path=canonical_resource_path(
                bucket, encoded_key, location.use_path_style
            ),
            query_string=query_string,
            host=host_header(location.endpoint_host, bucket, location.use_path_style),
        )
        string_to_sign = self._create_string_to_sign(
            amz_date, credential_scope, canonical_request
        )
        signing_key = self._get_signature_key(date_stamp, location.region)
        signature = self._hmac_sha256(signing_key, string_to_sign).hex()

        logger.debug(
            "Presigned GET %s/%s (%s style, expires in %ss, scope %s)",
            bucket,
            encoded_key,
            "path" if location.use_path_style else "virtual-hosted",
            expires_seconds,
            credential_scope,
        )

        return SigningDetails(
            url=f"{base_url}?{query_string}&X-Amz-Signature={signature}",
            canonical_request=canonical_request,
            string_to_sign=string_to_sign,
            signature=signature,
            credential_scope=credential_scope,
            amz_date=amz_date,
        )

    def presign(self, location: ServiceLocation, request: SigningRequest) -> str:
        return self.sign(location, request).url


def presign_url(
    credentials: Credentials, location: ServiceLocation, request: SigningRequest
) -> str:
    return AWSSignatureV4(credentials).presign(location, request)


def _to_utc(timestamp: dt.datetime | None) -> dt.datetime:
    if timestamp is None:
        return dt.datetime.now(dt.UTC)
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=dt.UTC)
    return timestamp.astimezone(dt.UTC)
