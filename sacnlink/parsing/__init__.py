"""
This package contains the wire codecs used by sacnlink.

Sub-packages handle specific data formats:

- ``e131``: E1.31 (streaming ACN) data packets, split into the root, framing
  and DMP layers, plus the in-place fast path for resending a universe.
"""
