"""Normalize upstream payloads and ingredient measures.

Response decoders live in :mod:`chefscompanion.normalize.responses`.
"""

from chefscompanion.normalize.measures import (
    format_quantity,
    parse_quantity_token,
    scale_measure,
)

__all__ = [
    "format_quantity",
    "parse_quantity_token",
    "scale_measure",
]
