#!/usr/bin/env python3
"""
Basic usage examples for the SimpleDB client library.

This script creates a scratch domain, stores and reads items, runs a
select query and removes the domain again. Credentials are read from
AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY.
"""

import logging
import os
import sys
import time

from sdb_client import (
    SimpleDBClient,
    SimpleDBClientError,
    SimpleDBError,
    Item,
    LogWriter
)

REGION = "eu-west-1"


def check_environment():
    """Exit with an error if credentials are missing."""
    for code, name in ((1, "AWS_ACCESS_KEY_ID"), (2, "AWS_SECRET_ACCESS_KEY")):
        if not os.environ.get(name):
            print(
                f"Environment parameter {name} is not set, can not connect to SimpleDB, "
                "read about AWS authentication on the AWS homepage",
                file=sys.stderr
            )
            sys.exit(code)


def main():
    """Run basic usage examples."""

    domain = f"example-{int(time.time())}"

    print("=== SimpleDB Python Client Basic Usage Examples ===\n")

    print("1. Creating client...")
    client = SimpleDBClient.from_env(REGION)
    print(f"   Client created for: {client.url}\n")

    try:
        print(f"2. Creating domain {domain}...")
        result = client.create_domain(domain)
        print(f"   ✓ Request id: {result.response_metadata.request_id}")
        print(f"   Box usage: {result.response_metadata.box_usage}")
        print()

        print("3. Listing domains...")
        domains = client.list_domains()
        for name in domains.domain_names:
            print(f"   - {name}")
        print()

        print("4. Storing a single item...")
        item = Item("alice")
        item.add_attribute("email", "alice@example.com")
        item.add_attribute("role", "admin")
        item.add_attribute("role", "developer")
        client.put_attributes(domain, item)
        print(f"   ✓ Stored {item.name} with {len(item.attributes)} attributes")
        print()

        print("5. Storing several items in one call...")
        items = []
        for name in ("bob", "carol"):
            batch_item = Item(name)
            batch_item.add_attribute("role", "developer")
            items.append(batch_item)
        client.batch_put_attributes(domain, items)
        print(f"   ✓ Stored {len(items)} items")
        print()

        print("6. Reading an item back...")
        attributes = client.get_attributes(domain, "alice")
        for attribute in attributes.attributes:
            print(f"   {attribute.name} = {attribute.value}")
        print()

        print("7. Running a select query...")
        selected = client.select(f"select * from `{domain}` where role = 'developer'")
        for found in selected.items:
            print(f"   - {found.name}")
        print()

        print("8. Domain metadata...")
        metadata = client.domain_metadata(domain)
        print(f"   Items: {metadata.item_count}")
        print(f"   Attribute values: {metadata.attribute_value_count}")
        print()

        print("9. Demonstrating error handling...")
        try:
            client.create_domain("")
        except SimpleDBError as e:
            print(f"   ✓ Service rejected empty name: {e.code} ({e.request_id})")
        print(f"   Last request: {client.raw_request}")
        print(f"   Last response: {client.raw_response.decode('utf-8', errors='replace')}")
        print()

        print("10. Writing log lines through the log writer...")
        with LogWriter(SimpleDBClient.from_env(REGION), domain, batch_size=5) as writer:
            handler = logging.StreamHandler(writer)
            log = logging.getLogger("example")
            log.addHandler(handler)
            log.setLevel(logging.INFO)
            for i in range(5):
                log.info("log line %d", i)
            log.removeHandler(handler)
        print("   ✓ Log lines stored")
        print()

        print("11. Deleting item and domain...")
        client.delete_item(domain, "alice")
        client.delete_domain(domain)
        print("   ✓ Cleaned up")
        print()

        print("=== All Examples Completed Successfully! ===")

    except SimpleDBClientError as e:
        print(f"SimpleDB Client Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        client.close()


def demonstrate_configuration():
    """Demonstrate client configuration options."""

    print("\n=== Configuration Options Example ===")

    with SimpleDBClient.from_env(REGION, timeout=60) as client:
        print("✓ Client configured with:")
        print(f"  - Endpoint: {client.host}")
        print(f"  - HTTP timeout: {client.config['timeout']} seconds")


if __name__ == "__main__":
    check_environment()

    main()
    demonstrate_configuration()
