"""Presigned S3 object URLs with AWS Signature Version 4."""

__version__ = "0.1.0"

from .auth import AWSSignatureV4, presign_url
from .exceptions import InvalidInputError, S3SignerError
from .functions import get_object_url
from .models import (
    Credentials,
    ServiceLocation,
    SigningDetails,
    SigningRequest,
    SignResult,
)
from .signer import Signer
from .urlparsing import encode_object_key

__all__ = [
    "AWSSignatureV4",
    "Credentials",
    "InvalidInputError",
    "S3SignerError",
    "ServiceLocation",
    "SignResult",
    "Signer",
    "SigningDetails",
    "SigningRequest",
    "encode_object_key",
    "get_object_url",
    "presign_url",
]
