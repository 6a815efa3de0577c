"""
Multipart form assembly for signed Cloudinary requests.

The form is rendered lazily: text fields are encoded up front, the file
part is pulled from its FileStream while the body is being sent.
"""

import time
import uuid
from typing import Iterator, List, Mapping, Optional, Tuple, Union

from .constants import (
    FIELD_API_KEY,
    FIELD_FILE,
    FIELD_RESOURCE_TYPE,
    FIELD_SIGNATURE,
    FIELD_TIMESTAMP,
    FILE_CONTENT_TYPE,
)
from .credentials import Credentials
from .exceptions import PartConstructionError
from .signing import build_signature, signable_params
from .streaming import FileStream

CRLF = b"\r\n"

# WHATWG form-data escaping for filenames
FILENAME_ESCAPES = str.maketrans({'"': '%22', '\r': '%0D', '\n': '%0A'})


def _check_header_token(kind: str, value: str) -> str:
    """Reject values that would break out of a part header line."""
    if any(c in value for c in '"\r\n'):
        raise PartConstructionError(f"{kind} {value!r} contains a quote or line break")
    return value


def current_timestamp() -> int:
    """Milliseconds since the epoch."""
    return int(time.time() * 1000)


class MultipartForm:
    """
    multipart/form-data body made of text fields and at most one file part.

    Iterating the form yields the encoded body in chunks. Because the file
    part is a single-pass stream, a form with a file can only be sent once.
    """

    def __init__(self, boundary: Optional[str] = None):
        self.boundary = boundary or f"----cloudinary-{uuid.uuid4().hex}"
        self.fields: List[Tuple[str, str]] = []
        self.file_name: Optional[str] = None
        self.file_part: Optional[FileStream] = None
        self.file_content_type = FILE_CONTENT_TYPE

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self.boundary}"

    def text(self, name: str, value: str) -> 'MultipartForm':
        """
        Append a text field.

        Raises:
            PartConstructionError: If the name contains a quote or line break
        """
        self.fields.append((_check_header_token("field name", name), str(value)))
        return self

    def part(self, name: str, stream: FileStream, content_type: str = FILE_CONTENT_TYPE) -> 'MultipartForm':
        """
        Attach a streamed file part.

        Raises:
            PartConstructionError: If a file part is already attached or the
                stream cannot be sent
        """
        if self.file_part is not None:
            raise PartConstructionError("form already has a file part")
        if not isinstance(stream, FileStream):
            raise PartConstructionError(f"expected a FileStream, got {type(stream).__name__}")
        if stream.consumed:
            raise PartConstructionError(f"stream for {stream.filename!r} was already consumed")

        self.file_name = _check_header_token("part name", name)
        self.file_part = stream
        self.file_content_type = _check_header_token("content type", content_type)
        return self

    def get(self, name: str) -> Optional[str]:
        """Return the first text field value with the given name."""
        for key, value in self.fields:
            if key == name:
                return value
        return None

    def field_names(self) -> List[str]:
        return [key for key, _ in self.fields]

    def _field_header(self, name: str) -> bytes:
        return (
            f"--{self.boundary}\r\n"
            f'Content-Disposition: form-data; name="{name}"\r\n\r\n'
        ).encode('utf-8')

    def _file_header(self) -> bytes:
        filename = self.file_part.filename.translate(FILENAME_ESCAPES)
        return (
            f"--{self.boundary}\r\n"
            f'Content-Disposition: form-data; name="{self.file_name}"; filename="{filename}"\r\n'
            f"Content-Type: {self.file_content_type}\r\n\r\n"
        ).encode('utf-8')

    def __iter__(self) -> Iterator[bytes]:
        for name, value in self.fields:
            yield self._field_header(name) + value.encode('utf-8') + CRLF

        if self.file_part is not None:
            yield self._file_header()
            yield from self.file_part
            yield CRLF

        yield f"--{self.boundary}--\r\n".encode('utf-8')


def build_form_data(
    credentials: Credentials,
    params: Mapping[str, str],
    timestamp: Optional[Union[int, str]] = None,
    file_part: Optional[FileStream] = None,
) -> MultipartForm:
    """
    Build a signed multipart form.

    Args:
        credentials: Account credentials
        params: Caller parameters; resource_type travels unsigned
        timestamp: Request timestamp in milliseconds, defaults to now
        file_part: Streamed file to attach as the 'file' part

    Returns:
        MultipartForm ready to send

    Raises:
        PartConstructionError: If the file part cannot be attached or a
            parameter name contains a quote or line break
    """
    if timestamp is None:
        timestamp = current_timestamp()
    timestamp = str(timestamp)

    form = MultipartForm()
    form.text(FIELD_API_KEY, str(credentials.api_key))
    form.text(FIELD_TIMESTAMP, timestamp)

    resource_type = params.get(FIELD_RESOURCE_TYPE)
    if resource_type is not None:
        form.text(FIELD_RESOURCE_TYPE, resource_type)

    signed = signable_params(params)
    form.text(FIELD_SIGNATURE, build_signature(signed, timestamp, credentials.api_secret))

    for key in sorted(signed):
        form.text(key, signed[key])

    if file_part is not None:
        form.part(FIELD_FILE, file_part)

    return form
