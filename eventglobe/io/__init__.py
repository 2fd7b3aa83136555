"""GDELT Event Globe I/O package.

File and reference-data loading only — no business logic in this layer.
"""

from eventglobe.io.persistence import cycle_directory, read_reference_file, write_snapshot_payload
from eventglobe.io.reference_loader import load_reference_data

__all__ = [
    "cycle_directory",
    "read_reference_file",
    "write_snapshot_payload",
    "load_reference_data",
]
