"""
Upload options.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Union

from .constants import FIELD_RESOURCE_TYPE


def _format_value(value) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (list, tuple)):
        return ','.join(str(v) for v in value)
    return str(value)


@dataclass
class UploadOptions:
    """
    Optional parameters for an image upload.

    Anything not covered by a named attribute can be passed through
    ``extra``; all values are signed except ``resource_type``.
    """

    public_id: Optional[str] = None
    folder: Optional[str] = None
    tags: Optional[List[str]] = None
    overwrite: Optional[bool] = None
    unique_filename: Optional[bool] = None
    use_filename: Optional[bool] = None
    invalidate: Optional[bool] = None
    resource_type: Optional[str] = None
    extra: Dict[str, object] = field(default_factory=dict)

    def to_params(self) -> Dict[str, str]:
        """Render the options as form parameters, skipping unset values."""
        params = {
            'public_id': self.public_id,
            'folder': self.folder,
            'tags': self.tags,
            'overwrite': self.overwrite,
            'unique_filename': self.unique_filename,
            'use_filename': self.use_filename,
            'invalidate': self.invalidate,
            FIELD_RESOURCE_TYPE: self.resource_type,
        }
        params.update(self.extra)
        return {k: _format_value(v) for k, v in params.items() if v is not None}


def to_params(options: Optional[Union[UploadOptions, Mapping[str, object]]]) -> Dict[str, str]:
    """Normalize UploadOptions, a plain mapping or None into form parameters."""
    if options is None:
        return {}
    if isinstance(options, UploadOptions):
        return options.to_params()
    return {k: _format_value(v) for k, v in options.items() if v is not None}
