"""Playback sink interface for streamed PCM16 audio deltas."""

from __future__ import annotations

from typing import Protocol


class AudioSink(Protocol):
    def append(self, pcm: bytes) -> None: ...

    def reset(self) -> None: ...


__all__ = ["AudioSink"]
