"""Domain value objects."""

from container_panel.domain.value_objects.formatting import (
    NOT_AVAILABLE,
    SIZE_UNITS,
    epoch_to_iso,
    format_bytes,
    format_port,
)
from container_panel.domain.value_objects.identifiers import (
    NO_TAG,
    ImageId,
    display_name,
    split_repo_tag,
    strip_digest_prefix,
)

__all__ = [
    "NOT_AVAILABLE",
    "NO_TAG",
    "SIZE_UNITS",
    "ImageId",
    "display_name",
    "epoch_to_iso",
    "format_bytes",
    "format_port",
    "split_repo_tag",
    "strip_digest_prefix",
]
