"""
Unit tests for the buffering log writer.
"""

import logging
import re
import threading
from unittest.mock import Mock, patch

import pytest

from sdb_client import LogWriter, SimpleDBError


class TestLogWriter:
    """Test buffering and batch flushing."""

    @pytest.fixture
    def client(self):
        """Create a stand-in client recording batch puts."""
        return Mock()

    @pytest.fixture
    def writer(self, client):
        writer = LogWriter(client, "logs")
        yield writer
        writer.close()

    def test_write_returns_length(self, writer):
        """Test write reports the whole input as accepted."""
        assert writer.write(b"  hello \n") == 9
        assert writer.write("text") == 4

    def test_buffers_below_batch_size(self, client, writer):
        """Test nothing is sent before the batch is full."""
        for i in range(24):
            writer.write(f"line {i}\n".encode())

        assert len(writer._buffer) == 24
        client.batch_put_attributes.assert_not_called()

    def test_flushes_full_batch(self, client):
        """Test 25 writes send exactly one batch of 25 items."""
        writer = LogWriter(client, "logs")
        for i in range(25):
            writer.write(f"  line {i} \n".encode())
        writer.close()

        client.batch_put_attributes.assert_called_once()
        domain, items = client.batch_put_attributes.call_args[0]
        assert domain == "logs"
        assert len(items) == 25
        assert len({item.name for item in items}) == 25
        for i, item in enumerate(items):
            assert len(item.attributes) == 1
            assert item.attributes[0].name == "msg"
            assert item.attributes[0].value == f"line {i}"

    def test_write_after_flush_starts_new_buffer(self, client):
        """Test the 26th write lands in a fresh buffer."""
        writer = LogWriter(client, "logs")
        for i in range(26):
            writer.write(f"line {i}".encode())

        assert len(writer._buffer) == 1
        assert writer._buffer[0].attributes[0].value == "line 25"

        writer.close()
        assert client.batch_put_attributes.call_count == 2
        last_batch = client.batch_put_attributes.call_args_list[1][0][1]
        assert [item.attributes[0].value for item in last_batch] == ["line 25"]

    def test_item_names_increase(self, writer):
        """Test item names are time based and strictly increasing."""
        for _ in range(10):
            writer.write(b"x")

        names = [item.name for item in writer._buffer]
        assert names == sorted(names)
        assert len(set(names)) == 10
        for name in names:
            assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{9}", name)

    def test_close_sends_partial_batch(self, client):
        """Test close sends whatever is buffered."""
        writer = LogWriter(client, "logs")
        writer.write(b"only line")
        writer.close()

        client.batch_put_attributes.assert_called_once()
        assert len(client.batch_put_attributes.call_args[0][1]) == 1

    def test_stream_handler_keeps_buffering(self, client, writer):
        """Test use as a logging stream does not send per record."""
        log = logging.getLogger("test_log_writer.stream")
        handler = logging.StreamHandler(writer)
        log.addHandler(handler)
        try:
            log.warning("first")
            log.warning("second")
        finally:
            log.removeHandler(handler)

        client.batch_put_attributes.assert_not_called()
        assert [i.attributes[0].value for i in writer._buffer] == ["first", "second"]

    def test_close_without_writes(self, client):
        """Test closing an empty writer sends nothing."""
        with LogWriter(client, "logs"):
            pass

        client.batch_put_attributes.assert_not_called()

    def test_write_after_close_raises(self, client):
        """Test a closed writer rejects writes like a closed file."""
        writer = LogWriter(client, "logs", batch_size=2)
        writer.close()

        assert writer.closed is True
        with pytest.raises(ValueError, match="closed file"):
            writer.write(b"a")
        with pytest.raises(ValueError, match="closed file"):
            writer.write(b"b")

        assert writer._buffer == []
        client.batch_put_attributes.assert_not_called()

    def test_close_twice(self, client):
        """Test a second close does nothing."""
        writer = LogWriter(client, "logs")
        writer.write(b"line")
        writer.close()
        writer.close()

        client.batch_put_attributes.assert_called_once()

    def test_stream_handler_after_close(self, client):
        """Test a handler left attached after close does not raise to the logger."""
        log = logging.getLogger("test_log_writer.closed")
        log.propagate = False
        with LogWriter(client, "logs", batch_size=1) as writer:
            handler = logging.StreamHandler(writer)
            log.addHandler(handler)
        try:
            with patch.object(handler, "handleError") as handle_error:
                log.warning("late record")
        finally:
            log.removeHandler(handler)

        handle_error.assert_called_once()
        client.batch_put_attributes.assert_not_called()

    def test_custom_batch_size(self, client):
        """Test a smaller batch size."""
        with LogWriter(client, "logs", batch_size=2) as writer:
            for i in range(4):
                writer.write(f"{i}".encode())

        assert client.batch_put_attributes.call_count == 2

    def test_flush_failure_is_logged(self, client, caplog):
        """Test a failing batch is logged and not raised to the writer."""
        client.batch_put_attributes.side_effect = SimpleDBError(
            "NumberSubmittedItemsExceeded", "Too many items.", "r1"
        )

        with caplog.at_level(logging.ERROR, logger="sdb_client.log_writer"):
            writer = LogWriter(client, "logs", batch_size=1)
            writer.write(b"boom")
            writer.close()

        assert "Failed to store 1 log items in logs" in caplog.text

    def test_concurrent_writes(self, client):
        """Test writes from several threads are all delivered once."""
        writer = LogWriter(client, "logs")

        def produce(n):
            for i in range(50):
                writer.write(f"{n}-{i}".encode())

        threads = [threading.Thread(target=produce, args=(n,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        writer.close()

        batches = [c[0][1] for c in client.batch_put_attributes.call_args_list]
        assert [len(b) for b in batches] == [25] * 8
        values = [item.attributes[0].value for b in batches for item in b]
        assert sorted(values) == sorted(f"{n}-{i}" for n in range(4) for i in range(50))
        names = [item.name for b in batches for item in b]
        assert len(set(names)) == 200
