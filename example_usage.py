#!/usr/bin/env python3
"""
Basic usage examples for the Cloudinary client library.

Usage:
    CLOUDINARY_URL=cloudinary://<api_key>:<api_secret>@<cloud_name> \\
        python example_usage.py path/to/image.jpg
"""

import logging
import os
import sys

from cloudinary_client import (
    CloudinaryClient,
    CloudinaryClientError,
    Success,
    UploadOptions,
    build_signature
)


def main():
    """Run basic usage examples."""
    logging.basicConfig(level=logging.INFO)

    if len(sys.argv) != 2:
        print(__doc__)
        return 1
    image_path = sys.argv[1]

    print("=== Cloudinary Client Basic Usage Examples ===\n")

    # Example 1: signatures are plain functions of params, timestamp and secret
    print("1. Computing a request signature...")
    signature = build_signature({"public_id": "sample"}, 1700000000000, "secret")
    print(f"   public_id=sample&timestamp=1700000000000 -> {signature}\n")

    try:
        # Example 2: client from the environment
        print("2. Creating client from CLOUDINARY_URL...")
        client = CloudinaryClient.from_env()
        print(f"   {client!r}\n")
    except CloudinaryClientError as e:
        print(f"   ✗ {e}")
        return 1

    with client:
        try:
            # Example 3: upload, the file is streamed and closed by the client
            print("3. Uploading image...")
            public_id = os.path.splitext(os.path.basename(image_path))[0]
            options = UploadOptions(public_id=public_id, tags=["example"], overwrite=True)
            with open(image_path, "rb") as handle:
                result = client.upload_image(handle, options=options)
            if not isinstance(result, Success):
                print(f"   ✗ Upload failed: {result.message}")
                return 1
            upload = result.payload
            print(f"   ✓ {upload.public_id}: {upload.width}x{upload.height} {upload.format}")
            print(f"   URL: {upload.secure_url}\n")

            # Example 4: rename
            print("4. Renaming image...")
            new_public_id = f"{public_id}-renamed"
            result = client.rename_image(upload.public_id, new_public_id)
            if result.ok:
                print(f"   ✓ Renamed to {result.payload.public_id}\n")
            else:
                print(f"   ✗ Rename failed: {result.message}\n")
                new_public_id = upload.public_id

            # Example 5: delete, unwrap() raises ServiceReportedError on failure
            print("5. Deleting image...")
            deleted = client.delete_image(new_public_id).unwrap()
            print(f"   ✓ Result: {deleted.result}\n")
        except CloudinaryClientError as e:
            print(f"   ✗ {type(e).__name__}: {e}")
            return 1

    print("=== Examples completed ===")
    return 0


if __name__ == "__main__":
    sys.exit(main())
