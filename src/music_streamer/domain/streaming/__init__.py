"""Streaming domain - HTTP byte-range planning and file reads."""

from .ranges import StreamPlan, parse_range, plan_stream, iter_file_range

__all__ = [
    "StreamPlan",
    "parse_range",
    "plan_stream",
    "iter_file_range",
]
