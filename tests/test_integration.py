"""
Integration tests against the live SimpleDB service.

Credentials are read from AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY;
the module is skipped when either is missing.
"""

import logging
import os
import uuid

import pytest

from sdb_client import SimpleDBClient, SimpleDBError, Item

logger = logging.getLogger(__name__)

if not (os.environ.get("AWS_ACCESS_KEY_ID") and os.environ.get("AWS_SECRET_ACCESS_KEY")):
    pytest.skip(
        "AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY must be set to connect to SimpleDB",
        allow_module_level=True
    )


class TestIntegration:
    """Integration tests with the SimpleDB service."""
    REGION = "eu-west-1"

    @pytest.fixture
    def client(self):
        """Create client from environment credentials."""
        with SimpleDBClient.from_env(self.REGION) as client:
            yield client
            logger.debug("last request: %s", client.raw_request)
            logger.debug("last response: %s", client.raw_response)

    @pytest.fixture
    def domain(self, client):
        """Create a scratch domain and delete it afterwards."""
        name = f"testing-{uuid.uuid4().hex[:12]}"
        client.create_domain(name)
        yield name
        client.delete_domain(name)

    def test_create_domain_missing_name(self, client):
        """Test creating a domain without a name fails with a service error."""
        with pytest.raises(SimpleDBError) as exc_info:
            client.create_domain("")

        assert exc_info.value.code == "InvalidParameterValue"

    def test_delete_domain_missing_name(self, client):
        """Test deleting a domain without a name fails with a service error."""
        with pytest.raises(SimpleDBError) as exc_info:
            client.delete_domain("")

        assert exc_info.value.code == "InvalidParameterValue"

    def test_domain_metadata(self, client, domain):
        """Test a fresh domain reports no items."""
        metadata = client.domain_metadata(domain)

        assert metadata.item_count == 0
        assert metadata.response_metadata.request_id

    def test_create_and_delete_domain(self, client):
        """Test creating then deleting a domain."""
        name = f"testing-{uuid.uuid4().hex[:12]}"

        client.create_domain(name)
        client.delete_domain(name)

    def test_put_and_get_attributes(self, client, domain):
        """Test stored attributes can be read back."""
        item = Item("item1")
        item.add_attribute("color", "red")
        item.add_attribute("size", "small medium")

        client.put_attributes(domain, item)
        result = client.get_attributes(domain, "item1")

        # reads are eventually consistent, the item may not be visible yet
        assert {a.name for a in result.attributes} <= {"color", "size"}
