"""
Cloudinary image API client.

This module provides signed upload, rename and delete calls against the
Cloudinary REST API, returning typed Success/Failure outcomes.
"""

import logging
import os
from typing import BinaryIO, Mapping, Optional, Union

from .constants import DEFAULT_CONFIG, ENV_CLOUDINARY_URL
from .credentials import Credentials, parse_cloudinary_url
from .exceptions import ConfigurationError, PartConstructionError
from .multipart import build_form_data
from .results import Outcome, decode_delete, decode_rename, decode_upload
from .streaming import FileStream
from .transport import RequestsTransport, Transport
from .upload import UploadOptions, to_params

logger = logging.getLogger(__name__)


class CloudinaryClient:
    """
    Client for the Cloudinary image API.

    Every call is signed with the account secret and decoded by response
    shape. The client holds no per-request state and can be shared between
    threads; file handles cannot.
    """

    def __init__(
        self,
        cloud_name: str,
        api_key: int,
        api_secret: str,
        transport: Optional[Transport] = None,
        **config,
    ):
        """
        Initialize the client.

        Args:
            cloud_name: Cloudinary cloud name
            api_key: Numeric API key
            api_secret: API secret used for signing
            transport: Custom transport; defaults to a requests session
            **config: Configuration options (timeout, chunk_size, api_base_url)
        """
        self.credentials = Credentials(cloud_name, api_key, api_secret)

        # Merge default config with user overrides
        self.config = {**DEFAULT_CONFIG, **config}

        self._validate_config()

        self.transport = transport or RequestsTransport(timeout=self.config['timeout'])

    @classmethod
    def from_url(cls, url: str, transport: Optional[Transport] = None, **config) -> 'CloudinaryClient':
        """
        Create a client from cloudinary://<api_key>:<api_secret>@<cloud_name>.

        Raises:
            ConnectionStringParseError: If the url is incomplete
        """
        credentials = parse_cloudinary_url(url)
        return cls(
            credentials.cloud_name,
            credentials.api_key,
            credentials.api_secret,
            transport=transport,
            **config,
        )

    @classmethod
    def from_env(cls, transport: Optional[Transport] = None, **config) -> 'CloudinaryClient':
        """Create a client from the CLOUDINARY_URL environment variable."""
        url = os.environ.get(ENV_CLOUDINARY_URL)
        if not url:
            raise ConfigurationError(f"{ENV_CLOUDINARY_URL} is not set")
        return cls.from_url(url, transport=transport, **config)

    @property
    def cloud_name(self) -> str:
        return self.credentials.cloud_name

    def _validate_config(self):
        """Validate client configuration."""
        if not self.credentials.cloud_name:
            raise ConfigurationError("cloud_name cannot be empty")

        if not self.credentials.api_secret:
            raise ConfigurationError("api_secret cannot be empty")

        if isinstance(self.credentials.api_key, bool) or not isinstance(self.credentials.api_key, int):
            raise ConfigurationError("api_key must be an integer")

        if self.config['timeout'] <= 0:
            raise ConfigurationError("timeout must be positive")

        if self.config['chunk_size'] <= 0:
            raise ConfigurationError("chunk_size must be positive")

        if not self.config['api_base_url']:
            raise ConfigurationError("api_base_url cannot be empty")

    def _endpoint(self, action: str) -> str:
        base_url = self.config['api_base_url'].rstrip('/')
        return f"{base_url}/{self.cloud_name}/image/{action}"

    def _send(self, action: str, params: Mapping[str, str], file_part: Optional[FileStream] = None) -> str:
        """Build the signed form for an image action and send it."""
        form = build_form_data(self.credentials, params, file_part=file_part)
        url = self._endpoint(action)

        logger.debug("POST %s fields=%s", url, form.field_names())
        return self.transport.post(url, form, form.content_type)

    def upload_image(
        self,
        file: Union[BinaryIO, FileStream],
        filename: Optional[str] = None,
        options: Optional[Union[UploadOptions, Mapping[str, object]]] = None,
    ) -> Outcome:
        """
        Upload an image.

        The file is streamed, not read into memory. The client takes
        ownership of the handle and closes it when the call returns or
        raises; a failed upload needs a freshly opened file.

        Args:
            file: Open binary file handle or a FileStream
            filename: Filename sent with the file part; defaults to the
                handle's basename. A FileStream carries its own filename,
                a different one here is rejected
            options: UploadOptions or a mapping of upload parameters

        Returns:
            Success(UploadResponse) or Failure(message)

        Raises:
            PartConstructionError: If the file cannot be streamed
            TransportError: If the request fails
            MalformedResponseError: If the response cannot be decoded
        """
        if isinstance(file, FileStream):
            if filename is not None and filename != file.filename:
                raise PartConstructionError(
                    f"filename {filename!r} conflicts with stream filename {file.filename!r}"
                )
            stream = file
        else:
            if filename is None:
                name = getattr(file, 'name', None)
                if not isinstance(name, str):
                    raise PartConstructionError("filename is required for handles without a name")
                filename = os.path.basename(name)
            stream = FileStream(file, filename, chunk_size=self.config['chunk_size'])

        logger.info("Uploading %s to %s", stream.filename, self.cloud_name)
        try:
            text = self._send('upload', to_params(options), file_part=stream)
        finally:
            stream.close()
        return decode_upload(text)

    def rename_image(self, public_id: str, new_public_id: str) -> Outcome:
        """
        Rename an image.

        Returns:
            Success(RenameResponse) or Failure(message)
        """
        params = {
            'from_public_id': public_id,
            'to_public_id': new_public_id,
        }
        text = self._send('rename', params)
        return decode_rename(text)

    def delete_image(self, public_id: str) -> Outcome:
        """
        Delete an image.

        Returns:
            Success(DeleteResponse) or Failure(message)
        """
        text = self._send('destroy', {'public_id': public_id})
        return decode_delete(text)

    def close(self):
        """Close the transport."""
        if self.transport:
            self.transport.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    def __repr__(self):
        return f"CloudinaryClient(cloud_name={self.cloud_name!r}, api_key={self.credentials.api_key!r})"
