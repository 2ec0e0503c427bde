from .dataset import ByteDataset, generate_bytes, read_bytes, write_bytes
from .validation import validate_preconditions

__all__ = [
    "ByteDataset",
    "generate_bytes",
    "read_bytes",
    "write_bytes",
    "validate_preconditions",
]
