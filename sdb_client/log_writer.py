"""
Best-effort log sink storing each written line as a SimpleDB item.
"""

import datetime
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Union

from .constants import LOG_BATCH_SIZE, LOG_MESSAGE_ATTRIBUTE
from .models import Item

logger = logging.getLogger(__name__)


class LogWriter:
    """
    File-like writer buffering messages and storing them with batch puts.

    Each ``write`` becomes one item named after the UTC time of the write
    with a single ``msg`` attribute. Once ``batch_size`` items are buffered
    they are sent with one ``batch_put_attributes`` call on a background
    worker and the buffer starts over. Only one batch is sent at a time;
    further batches queue behind it. A failed batch is logged and dropped.
    There is no flush(); a partial batch is only sent by close(). Writing
    to a closed writer raises ValueError, like a closed file.

    The client is used from the worker thread, so it must be dedicated to
    the writer and not used for other calls while the writer is open.

    Example:
        writer = LogWriter(SimpleDBClient.from_env("eu-west-1"), "logs")
        logging.basicConfig(stream=writer)
    """

    def __init__(self, client, domain: str, batch_size: int = LOG_BATCH_SIZE):
        self.client = client
        self.domain = domain
        self.batch_size = batch_size

        self._lock = threading.Lock()
        self._buffer: List[Item] = []
        self._last_ns = 0
        self._closed = False
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="sdb-log")

    def _item_name(self) -> str:
        # Called with the lock held; names strictly increase per writer.
        ns = max(time.time_ns(), self._last_ns + 1)
        self._last_ns = ns
        stamp = datetime.datetime.fromtimestamp(ns // 1_000_000_000, datetime.timezone.utc)
        return f"{stamp.strftime('%Y-%m-%dT%H:%M:%S')}.{ns % 1_000_000_000:09d}"

    def write(self, data: Union[bytes, str]) -> int:
        """
        Buffer one message.

        Returns:
            Number of bytes (or characters) accepted, always ``len(data)``
        """
        text = data.decode('utf-8', errors='replace') if isinstance(data, bytes) else data
        with self._lock:
            if self._closed:
                raise ValueError("I/O operation on closed file")
            item = Item(self._item_name())
            item.add_attribute(LOG_MESSAGE_ATTRIBUTE, text.strip())
            self._buffer.append(item)
            if len(self._buffer) >= self.batch_size:
                self._submit()
        return len(data)

    def _submit(self):
        # Called with the lock held.
        batch, self._buffer = self._buffer, []
        self._executor.submit(self._send, batch)

    def _send(self, batch: List[Item]):
        try:
            self.client.batch_put_attributes(self.domain, batch)
        except Exception:
            logger.exception("Failed to store %d log items in %s", len(batch), self.domain)

    def close(self):
        """Send buffered messages and wait for all batches to complete."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            if self._buffer:
                self._submit()
        self._executor.shutdown(wait=True)

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
