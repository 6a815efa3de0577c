"""
Streaming file adapter for multipart uploads.
"""

import logging
from typing import BinaryIO, Iterator

from .constants import DEFAULT_CHUNK_SIZE
from .exceptions import PartConstructionError

logger = logging.getLogger(__name__)


class FileStream:
    """
    Single-pass byte stream over an open file handle.

    The stream owns the handle: it is read lazily in chunks while the
    request body is sent and closed once the last chunk has been read.
    A consumed stream cannot be replayed; open the source again to resend.
    """

    def __init__(self, handle: BinaryIO, filename: str, chunk_size: int = DEFAULT_CHUNK_SIZE):
        """
        Wrap an open binary handle.

        Args:
            handle: Readable binary file object, owned by the stream from now on
            filename: Logical filename sent with the part
            chunk_size: Bytes per read

        Raises:
            PartConstructionError: If the handle is closed or not readable
        """
        if not filename:
            raise PartConstructionError("filename cannot be empty")
        if chunk_size <= 0:
            raise PartConstructionError("chunk_size must be positive")
        if getattr(handle, 'closed', False):
            raise PartConstructionError(f"cannot stream {filename!r}: file handle is closed")

        try:
            readable = handle.readable()
        except (AttributeError, OSError, ValueError) as e:
            raise PartConstructionError(f"cannot stream {filename!r}: {e}") from e
        if not readable:
            raise PartConstructionError(f"cannot stream {filename!r}: file handle is not readable")

        self.handle = handle
        self.filename = filename
        self.chunk_size = chunk_size
        self.consumed = False
        self._chunks = None

    def __iter__(self) -> Iterator[bytes]:
        if self.consumed:
            raise PartConstructionError(
                f"stream for {self.filename!r} was already consumed; reopen the file to send it again"
            )
        self.consumed = True
        self._chunks = self._read_chunks()
        return self._chunks

    def close(self):
        """
        Release the handle and mark the stream as consumed.

        Safe to call more than once, and before, during or after iteration.
        """
        self.consumed = True
        if self._chunks is not None:
            self._chunks.close()
        self.handle.close()

    def _read_chunks(self) -> Iterator[bytes]:
        sent = 0
        try:
            while True:
                try:
                    chunk = self.handle.read(self.chunk_size)
                except (OSError, ValueError) as e:
                    raise PartConstructionError(f"failed reading {self.filename!r}: {e}") from e
                if not chunk:
                    break
                sent += len(chunk)
                yield chunk
        finally:
            self.handle.close()
            logger.debug("Streamed %d bytes from %s", sent, self.filename)
