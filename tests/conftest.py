"""
Shared fixtures: sample Cloudinary response bodies.
"""

import json

import pytest


UPLOAD_PAYLOAD = {
    "asset_id": "3515c6000a548515f1134043f9785c2f",
    "public_id": "gotjephlnz2jgiu20zni",
    "version": 1719307544,
    "version_id": "7d2cc533bee9ff39f7da7414b61fce7e",
    "signature": "d0b1009e3271a942836c25756ce3e04d205bf754",
    "width": 1920,
    "height": 1441,
    "format": "jpg",
    "resource_type": "image",
    "created_at": "2024-06-25T09:25:44Z",
    "tags": ["sample"],
    "bytes": 896838,
    "type": "upload",
    "etag": "2a2df1d2d2c3b675521e866599273083",
    "placeholder": False,
    "url": "http://res.cloudinary.com/demo/image/upload/v1719307544/gotjephlnz2jgiu20zni.jpg",
    "secure_url": "https://res.cloudinary.com/demo/image/upload/v1719307544/gotjephlnz2jgiu20zni.jpg",
    "folder": "",
    "original_filename": "sample",
    "api_key": "614335564976464",
}

RENAME_PAYLOAD = {
    key: value for key, value in UPLOAD_PAYLOAD.items()
    if key not in ("etag", "original_filename", "api_key")
}


@pytest.fixture
def upload_payload():
    return dict(UPLOAD_PAYLOAD)


@pytest.fixture
def upload_body():
    return json.dumps(UPLOAD_PAYLOAD)


@pytest.fixture
def rename_body():
    return json.dumps(RENAME_PAYLOAD)


@pytest.fixture
def error_body():
    return json.dumps({"error": {"message": "bad request"}})
