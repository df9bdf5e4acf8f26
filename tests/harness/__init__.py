"""Test harness utilities for adapter validation."""

from .adapter_harness import assert_well_formed, collect, collect_async, event_types, streamed_text

__all__ = [
    "assert_well_formed",
    "collect",
    "collect_async",
    "event_types",
    "streamed_text",
]
