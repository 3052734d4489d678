"""
SimpleDB client.

Every action follows the same pipeline: reset the parameters, add the
action fields, sign, POST to the regional endpoint and decode the XML body
into the result type registered for that action.
"""

import logging
import os
from typing import Iterable, List, Optional, Type, TypeVar

import requests

from .constants import (
    CONTENT_TYPE,
    DEFAULT_CONFIG,
    ENV_ACCESS_KEY_ID,
    ENV_SECRET_ACCESS_KEY,
    PARAM_ACTION,
    REGIONS,
)
from .exceptions import ConfigurationError, DecodeError, HTTPError, SimpleDBError
from .models import (
    Attribute,
    BatchPutAttributesResponse,
    CreateDomainResponse,
    DeleteAttributesResponse,
    DeleteDomainResponse,
    DomainMetadataResponse,
    ErrorResponse,
    GetAttributesResponse,
    Item,
    ListDomainsResponse,
    PutAttributesResponse,
    Result,
    SelectResponse,
)
from .signer import Parameters, sign_parameters

logger = logging.getLogger(__name__)

R = TypeVar('R', bound=Result)


def resolve_region(region: str) -> str:
    """
    Resolve a region identifier or endpoint host to the endpoint host.

    Raises:
        ConfigurationError: If the region is not supported
    """
    if region in REGIONS:
        return REGIONS[region]
    if region in REGIONS.values():
        return region
    raise ConfigurationError(f"unsupported region: {region!r}")


class SimpleDBClient:
    """
    Client for the SimpleDB query API.

    An instance keeps the parameters of the call in progress, so it must not
    be shared between threads making concurrent calls. Use one client per
    thread or serialize access.

    After each call ``raw_request`` holds the exact body sent and
    ``raw_response`` the exact body received.
    """

    def __init__(self, access_key: str, secret_key: str, region: str, **config):
        """
        Initialize the client.

        Args:
            access_key: Access key id
            secret_key: Secret access key used for signing
            region: Region identifier (``eu-west-1``) or endpoint host
            **config: Configuration options (timeout)
        """
        self.access_key = access_key
        self.secret_key = secret_key

        self.config = {**DEFAULT_CONFIG, **config}
        self._validate_config()

        self.host = resolve_region(region)
        self.url = f"https://{self.host}"

        self.raw_request = ""
        self.raw_response = b""
        self._params = Parameters()
        self._action = ""

        self.session = requests.Session()

    @classmethod
    def from_env(cls, region: str, **config) -> 'SimpleDBClient':
        """
        Create a client from ``AWS_ACCESS_KEY_ID`` and ``AWS_SECRET_ACCESS_KEY``.

        Raises:
            ConfigurationError: If either variable is unset or empty
        """
        for name in (ENV_ACCESS_KEY_ID, ENV_SECRET_ACCESS_KEY):
            if not os.environ.get(name):
                raise ConfigurationError(
                    f"environment variable {name} is not set, can not connect to SimpleDB"
                )
        return cls(
            os.environ[ENV_ACCESS_KEY_ID],
            os.environ[ENV_SECRET_ACCESS_KEY],
            region,
            **config
        )

    def _validate_config(self):
        """Validate client configuration."""
        if not self.access_key:
            raise ConfigurationError("access_key cannot be empty")

        if not self.secret_key:
            raise ConfigurationError("secret_key cannot be empty")

        timeout = self.config['timeout']
        if timeout is not None and timeout <= 0:
            raise ConfigurationError("timeout must be positive")

    def __repr__(self):
        return f"SimpleDBClient(access_key={self.access_key!r}, host={self.host!r})"

    def _reset_parameters(self, action: str):
        self.raw_request = ""
        self.raw_response = b""
        self._action = action
        self._params.reset(self.access_key)
        self._params.add(PARAM_ACTION, action)

    def _add(self, key: str, value: str):
        self._params.add(key, value)

    def _add_attributes(self, attributes: Iterable[Attribute], prefix: str = ""):
        for j, attribute in enumerate(attributes, 1):
            self._add(f"{prefix}Attribute.{j}.Name", attribute.name)
            self._add(f"{prefix}Attribute.{j}.Value", attribute.value)

    def _post(self, result_cls: Type[R]) -> R:
        """
        Sign the current parameters, send them and decode the response.

        Args:
            result_cls: Result type the success body decodes into

        Returns:
            Decoded result

        Raises:
            HTTPError: If the request fails or the error envelope is empty
            DecodeError: If the response body cannot be decoded
            SimpleDBError: If the service reports an error
        """
        self.raw_request = sign_parameters(self._params, self.host, self.secret_key)
        logger.debug("POST %s Action=%s", self.url, self._action)

        try:
            response = self.session.post(
                self.url,
                data=self.raw_request.encode('utf-8'),
                headers={'Content-Type': CONTENT_TYPE},
                timeout=self.config['timeout']
            )
        except requests.RequestException as e:
            raise HTTPError(f"HTTP request failed: {e}")

        self.raw_response = response.content
        logger.debug("Response %s from %s", response.status_code, self.host)

        if response.status_code != 200:
            status = f"{response.status_code} {response.reason}"
            try:
                envelope = ErrorResponse.decode(self.raw_response)
            except DecodeError as e:
                raise DecodeError(f"{e} (HTTP {status})", response.status_code)
            if envelope.errors:
                first = envelope.errors[0]
                raise SimpleDBError(first.code, first.message, first.request_id)
            raise HTTPError(status, response.status_code)

        return result_cls.decode(self.raw_response)

    def list_domains(self) -> ListDomainsResponse:
        """List the domain names of the account."""
        self._reset_parameters('ListDomains')
        return self._post(ListDomainsResponse)

    def domain_metadata(self, name: str) -> DomainMetadataResponse:
        """Fetch item and attribute counts for a domain."""
        self._reset_parameters('DomainMetadata')
        self._add('DomainName', name)
        return self._post(DomainMetadataResponse)

    def create_domain(self, name: str) -> CreateDomainResponse:
        self._reset_parameters('CreateDomain')
        self._add('DomainName', name)
        return self._post(CreateDomainResponse)

    def delete_domain(self, name: str) -> DeleteDomainResponse:
        self._reset_parameters('DeleteDomain')
        self._add('DomainName', name)
        return self._post(DeleteDomainResponse)

    def put_attributes(self, domain: str, item: Item) -> PutAttributesResponse:
        """
        Store the attributes of a single item.

        Attributes are sent as ``Attribute.<n>.Name``/``Attribute.<n>.Value``
        starting at 1. The ``replace`` flag of an attribute is not sent.
        """
        self._reset_parameters('PutAttributes')
        self._add('DomainName', domain)
        self._add('ItemName', item.name)
        self._add_attributes(item.attributes)
        return self._post(PutAttributesResponse)

    def batch_put_attributes(self, domain: str, items: List[Item]) -> BatchPutAttributesResponse:
        """
        Store the attributes of several items in one call.

        Items are sent as ``Item.<i>.ItemName`` with their attributes under
        ``Item.<i>.Attribute.<j>.Name``/``Value``, both indexes starting at 1.
        """
        self._reset_parameters('BatchPutAttributes')
        self._add('DomainName', domain)
        for i, item in enumerate(items, 1):
            prefix = f"Item.{i}."
            self._add(f"{prefix}ItemName", item.name)
            self._add_attributes(item.attributes, prefix)
        return self._post(BatchPutAttributesResponse)

    def get_attributes(self, domain: str, item_name: str) -> GetAttributesResponse:
        self._reset_parameters('GetAttributes')
        self._add('DomainName', domain)
        self._add('ItemName', item_name)
        return self._post(GetAttributesResponse)

    def delete_attributes(
        self,
        domain: str,
        item_name: str,
        attributes: Optional[Iterable[Attribute]] = None
    ) -> DeleteAttributesResponse:
        """
        Delete attributes of an item, or the whole item when none are given.
        """
        self._reset_parameters('DeleteAttributes')
        self._add('DomainName', domain)
        self._add('ItemName', item_name)
        if attributes:
            self._add_attributes(attributes)
        return self._post(DeleteAttributesResponse)

    def delete_item(self, domain: str, item_name: str) -> DeleteAttributesResponse:
        return self.delete_attributes(domain, item_name)

    def select(self, expression: str) -> SelectResponse:
        """Run a select query. The expression is sent verbatim."""
        self._reset_parameters('Select')
        self._add('SelectExpression', expression)
        return self._post(SelectResponse)

    def close(self):
        """Close HTTP session."""
        if self.session:
            self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
