"""Decoding of captured browser traffic into domain events."""

from __future__ import annotations

from .translator import EVENT_KINDS, decode_event

__all__ = ["EVENT_KINDS", "decode_event"]
