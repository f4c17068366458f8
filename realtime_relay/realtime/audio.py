"""In-memory PCM16 sink for realtime audio deltas."""

from __future__ import annotations

from realtime_relay.config.transport import AUDIO_SAMPLE_RATE_HZ


class PcmBufferSink:
    """Collects PCM16 mono audio in memory."""

    def __init__(self, *, sample_rate: int = AUDIO_SAMPLE_RATE_HZ) -> None:
        self.sample_rate = sample_rate
        self._buffer = bytearray()

    def append(self, pcm: bytes) -> None:
        self._buffer.extend(pcm)

    def reset(self) -> None:
        self._buffer.clear()

    @property
    def data(self) -> bytes:
        return bytes(self._buffer)

    @property
    def duration_s(self) -> float:
        # 2 bytes per sample
        return len(self._buffer) / 2 / self.sample_rate


__all__ = ["PcmBufferSink"]
