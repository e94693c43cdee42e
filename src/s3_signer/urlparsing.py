import re
import urllib.parse

from yarl import URL

from .exceptions import InvalidInputError

_LABEL = r"[A-Za-z0-9]([A-Za-z0-9-]*[A-Za-z0-9])?"
_HOST_RE = re.compile(rf"^{_LABEL}(\.{_LABEL})*$")


def encode_object_key(key: str) -> str:
    """Percent-encodes an object key for use in a URL path.

    A literal ``+`` is taken to mean a space, everything outside the RFC 3986
    unreserved set is escaped (space becomes ``%20``) and ``/`` is kept as the
    path separator.
    """
    key = key.replace("+", " ")
    return urllib.parse.quote(key, safe="").replace("%2F", "/")


def build_object_url(
    endpoint_host: str, bucket: str, encoded_key: str, use_path_style: bool
) -> str:
    if use_path_style:
        return f"https://{endpoint_host}/{bucket}/{encoded_key}"
    return f"https://{bucket}.{endpoint_host}/{encoded_key}"


def canonical_resource_path(bucket: str, encoded_key: str, use_path_style: bool) -> str:
    # virtual-hosted style carries the bucket in the host instead
    if use_path_style:
        return f"/{bucket}/{encoded_key}"
    return f"/{encoded_key}"


def host_header(endpoint_host: str, bucket: str, use_path_style: bool) -> str:
    if use_path_style:
        return endpoint_host
    return f"{bucket}.{endpoint_host}"


def normalize_endpoint(endpoint: str) -> str:
    """Reduces an endpoint given as a bare host or an HTTPS URL to ``host[:port]``.

    Accepts ``s3.amazonaws.com``, ``minio.local:9000`` or
    ``https://<account>.r2.cloudflarestorage.com/``. The URL must not carry a
    path, query, fragment or user info, since the signed URL is built on the
    host alone.
    """
    endpoint = endpoint.strip()
    if not endpoint:
        raise InvalidInputError("Endpoint is mandatory.", field="endpoint")

    raw = endpoint if "://" in endpoint else f"https://{endpoint}"
    try:
        url = URL(raw)
        port = url.explicit_port
    except ValueError as e:
        raise InvalidInputError(
            f"Invalid endpoint '{endpoint}': {e}", field="endpoint"
        ) from e

    if url.scheme != "https" or not url.host:
        raise InvalidInputError(
            "Invalid endpoint URL. Must be a host name or a valid HTTPS URL.",
            field="endpoint",
        )
    if url.path not in ("", "/") or url.query_string or url.fragment:
        raise InvalidInputError(
            f"Endpoint '{endpoint}' must not contain a path, query or fragment.",
            field="endpoint",
        )
    if url.user or url.password:
        raise InvalidInputError(
            f"Endpoint '{endpoint}' must not contain credentials.", field="endpoint"
        )
    if not _HOST_RE.match(url.host):
        raise InvalidInputError(
            f"Endpoint host '{url.host}' is not a valid host name.", field="endpoint"
        )

    # clients omit the default port from the Host header
    if port and port != 443:
        return f"{url.host}:{port}"
    return url.host


def is_valid_s3_bucket_subdomain(bucket: str) -> bool:
    """S3-specific subdomain validation (stricter than general DNS)."""
    if not bucket or len(bucket) < 3 or len(bucket) > 63:
        return False

    if not re.match(r"^[a-z0-9.-]+$", bucket):
        return False

    if bucket[0] in "-." or bucket[-1] in "-.":
        return False

    if ".." in bucket or ".-" in bucket or "-." in bucket:
        return False

    # Cannot look like IP address
    if re.match(r"^\d+\.\d+\.\d+\.\d+$", bucket):
        return False

    return True
