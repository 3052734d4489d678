"""
Request parameter accumulation and Signature Version 2 signing.

The service recomputes the signature from the exact canonical query string,
so encoding order and escaping here must stay byte-for-byte stable.
"""

import base64
import datetime
import hashlib
import hmac
from typing import Dict, List, Tuple
from urllib.parse import urlencode

from .constants import (
    API_VERSION,
    HTTP_METHOD,
    PARAM_ACCESS_KEY_ID,
    PARAM_SIGNATURE,
    PARAM_SIGNATURE_METHOD,
    PARAM_SIGNATURE_VERSION,
    PARAM_TIMESTAMP,
    PARAM_VERSION,
    REQUEST_PATH,
    SIGNATURE_METHOD,
    SIGNATURE_VERSION,
)


def timestamp() -> str:
    """Current UTC time as ``YYYY-MM-DDThh:mm:ss+00:00``."""
    now = datetime.datetime.now(datetime.timezone.utc)
    return now.isoformat(timespec='seconds')


class Parameters:
    """
    Form fields of one in-flight action call.

    A key may hold several values; they are encoded in insertion order.
    """

    def __init__(self):
        self._values: Dict[str, List[str]] = {}

    def reset(self, access_key: str):
        """Drop all fields and reseed the protocol fields with a fresh timestamp."""
        self._values = {}
        self.add(PARAM_ACCESS_KEY_ID, access_key)
        self.add(PARAM_SIGNATURE_METHOD, SIGNATURE_METHOD)
        self.add(PARAM_SIGNATURE_VERSION, SIGNATURE_VERSION)
        self.add(PARAM_VERSION, API_VERSION)
        self.add(PARAM_TIMESTAMP, timestamp())

    def add(self, key: str, value: str):
        self._values.setdefault(key, []).append(value)

    def remove(self, key: str):
        self._values.pop(key, None)

    def get(self, key: str) -> List[str]:
        return list(self._values.get(key, []))

    def items(self) -> List[Tuple[str, str]]:
        """All (key, value) pairs sorted by key."""
        return [(k, v) for k in sorted(self._values) for v in self._values[k]]

    def __contains__(self, key: str) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return sum(len(values) for values in self._values.values())


def canonical_query(params: Parameters) -> str:
    """Form-encode parameters sorted by key, with spaces as ``%20``."""
    return urlencode(params.items()).replace('+', '%20')


def string_to_sign(host: str, params: Parameters) -> str:
    return '\n'.join((HTTP_METHOD, host, REQUEST_PATH, canonical_query(params)))


def sign(secret_key: str, data: str) -> str:
    """Base64-encoded HMAC-SHA256 of ``data``."""
    mac = hmac.new(
        secret_key.encode('utf-8'),
        data.encode('utf-8'),
        hashlib.sha256
    )
    return base64.b64encode(mac.digest()).decode('ascii')


def sign_parameters(params: Parameters, host: str, secret_key: str) -> str:
    """
    Sign the current parameters and return the request body.

    Any previous ``Signature`` field is discarded before signing, so the
    parameters can be re-signed after a change.

    Args:
        params: Parameters of the call, modified in place
        host: Endpoint host embedded in the string to sign
        secret_key: Secret access key

    Returns:
        Canonical query string including the ``Signature`` field
    """
    params.remove(PARAM_SIGNATURE)
    params.add(PARAM_SIGNATURE, sign(secret_key, string_to_sign(host, params)))
    return canonical_query(params)
