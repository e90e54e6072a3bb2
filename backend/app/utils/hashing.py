"""Content digests for the finalize audit trail.

The same function hashes the stored original and the serialized output, so an
audit record's two hashes are directly comparable with any sha256 tool.
"""

import hashlib
from typing import Union


def sha256_hex(data: Union[bytes, bytearray]) -> str:
    """Return the lowercase hex SHA-256 digest of ``data``.

    Raises:
        TypeError: if ``data`` is not a bytes-like buffer.
    """
    if not isinstance(data, (bytes, bytearray)):
        raise TypeError(
            "sha256_hex expects bytes, "
            f"got {type(data).__name__}"
        )

    return hashlib.sha256(data).hexdigest()
