"""
SimpleDB Client Library

A Python client for the SimpleDB query API. Requests are signed with
Signature Version 2 (HMAC-SHA256) and responses decoded from XML.

Example usage:
    from sdb_client import SimpleDBClient, Item

    client = SimpleDBClient("access-key", "secret-key", "eu-west-1")
    client.create_domain("users")

    item = Item("alice")
    item.add_attribute("email", "alice@example.com")
    client.put_attributes("users", item)
"""

from .client import SimpleDBClient
from .exceptions import (
    SimpleDBClientError,
    ConfigurationError,
    HTTPError,
    DecodeError,
    SimpleDBError
)
from .models import (
    Attribute,
    Item,
    ResponseMetadata,
    ListDomainsResponse,
    DomainMetadataResponse,
    CreateDomainResponse,
    DeleteDomainResponse,
    PutAttributesResponse,
    BatchPutAttributesResponse,
    GetAttributesResponse,
    DeleteAttributesResponse,
    SelectResponse
)
from .log_writer import LogWriter
from .constants import (
    SDB_REGION_EU_WEST_1,
    REGIONS,
    DEFAULT_CONFIG
)

__version__ = "1.0.0"
__all__ = [
    "SimpleDBClient",
    "LogWriter",
    "SimpleDBClientError",
    "ConfigurationError",
    "HTTPError",
    "DecodeError",
    "SimpleDBError",
    "Attribute",
    "Item",
    "ResponseMetadata",
    "ListDomainsResponse",
    "DomainMetadataResponse",
    "CreateDomainResponse",
    "DeleteDomainResponse",
    "PutAttributesResponse",
    "BatchPutAttributesResponse",
    "GetAttributesResponse",
    "DeleteAttributesResponse",
    "SelectResponse",
    "SDB_REGION_EU_WEST_1",
    "REGIONS",
    "DEFAULT_CONFIG"
]
