"""
Response payloads and outcome decoding.

The Cloudinary API does not tag its responses: a successful call returns
the asset payload, a failed one returns {"error": {"message": ...}}, and
the HTTP status is not a reliable discriminant. Responses are therefore
decoded by shape, in a fixed order:

1. the success payload of the operation,
2. the error payload,
3. otherwise MalformedResponseError.

A body that satisfies both shapes is treated as a success.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Generic, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from .exceptions import MalformedResponseError, ServiceReportedError

logger = logging.getLogger(__name__)

T = TypeVar('T', bound=BaseModel)


class ResponseModel(BaseModel):
    """Base for response payloads; unknown fields are ignored."""

    model_config = ConfigDict(frozen=True, extra='ignore')


class ErrorMessage(ResponseModel):
    message: str


class ErrorResponse(ResponseModel):
    """Error body returned by the service."""

    error: ErrorMessage


class UploadResponse(ResponseModel):
    """Payload of a successful image upload."""

    asset_id: str
    public_id: str
    version: int
    version_id: str
    signature: str
    width: int
    height: int
    format: str
    resource_type: str
    created_at: datetime
    tags: List[str]
    bytes: int
    type: str
    etag: str
    placeholder: bool
    url: str
    secure_url: str
    original_filename: str
    api_key: str
    # Undocumented, not always sent
    folder: Optional[str] = None
    overwritten: Optional[bool] = None


class RenameResponse(ResponseModel):
    """Payload of a successful rename."""

    asset_id: str
    public_id: str
    version: int
    version_id: str
    signature: str
    width: int
    height: int
    format: str
    resource_type: str
    created_at: datetime
    tags: List[str]
    bytes: int
    type: str
    placeholder: bool
    url: str
    secure_url: str
    # Undocumented, not always sent
    folder: Optional[str] = None


class DeleteResponse(ResponseModel):
    """Payload of a destroy call, e.g. {"result": "ok"} or {"result": "not found"}."""

    result: str


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful outcome carrying the decoded payload."""

    payload: T

    ok = True

    def unwrap(self) -> T:
        return self.payload


@dataclass(frozen=True)
class Failure:
    """Outcome of a request the service rejected."""

    message: str

    ok = False

    def unwrap(self):
        """
        Raises:
            ServiceReportedError: Always, with the service message
        """
        raise ServiceReportedError(self.message)


Outcome = Union[Success[T], Failure]


def decode_response(text: Union[str, bytes], model: Type[T]) -> Outcome:
    """
    Decode a response body into Success(model) or Failure(message).

    Args:
        text: Raw response body
        model: Expected success payload model

    Returns:
        Success with the parsed payload, or Failure with the service message

    Raises:
        MalformedResponseError: If the body matches neither shape
    """
    try:
        payload = model.model_validate_json(text)
    except ValidationError as success_error:
        try:
            error = ErrorResponse.model_validate_json(text)
        except ValidationError:
            raw = text.decode('utf-8', errors='replace') if isinstance(text, bytes) else text
            logger.warning("Malformed %s response: %s", model.__name__, success_error)
            raise MalformedResponseError(
                f"response is neither a {model.__name__} nor an error: {success_error}",
                raw=raw,
            ) from success_error

        logger.warning("Service reported error: %s", error.error.message)
        return Failure(error.error.message)

    logger.debug("Decoded %s", model.__name__)
    return Success(payload)


def decode_upload(text: Union[str, bytes]) -> Outcome:
    return decode_response(text, UploadResponse)


def decode_rename(text: Union[str, bytes]) -> Outcome:
    return decode_response(text, RenameResponse)


def decode_delete(text: Union[str, bytes]) -> Outcome:
    return decode_response(text, DeleteResponse)
