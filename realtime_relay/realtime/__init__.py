from .audio import PcmBufferSink
from .audio_sink import AudioSink
from .classifier import EventClassifier
from .events import EventKind, RealtimeEvent, decode_event

__all__ = ["AudioSink", "EventClassifier", "EventKind", "PcmBufferSink", "RealtimeEvent", "decode_event"]
