"""Direct WebRTC data-channel transport to the provider.

The relay only issues the ephemeral credential; media and events flow
peer-to-peer between this client and the provider.
"""

from __future__ import annotations

import logging
import contextlib
from typing import Any
from collections.abc import Callable

import httpx
from aiortc import RTCPeerConnection, RTCSessionDescription
from aiortc.contrib.media import MediaBlackhole

from realtime_relay.errors import RelayError, UpstreamUnreachable
from realtime_relay.realtime.audio_sink import AudioSink
from realtime_relay.realtime.helpers import dump_event, build_response_create_event
from realtime_relay.realtime.context import now_ms, append_message
from realtime_relay.config.upstream import DEFAULT_OPENAI_REALTIME_BASE_URL
from realtime_relay.state.phase import Closed, Bridged, Connecting
from realtime_relay.provider.signaling import exchange_sdp, fetch_ephemeral_token
from realtime_relay.config.transport import (
    ROLE_ERROR,
    TRANSPORT_WEBRTC,
    DATA_CHANNEL_LABEL,
    ICE_GATHERING_TIMEOUT_S,
)
from realtime_relay.config.messages import (
    STATUS_IDLE,
    STATUS_CLOSED,
    MSG_TOKEN_FAILED,
    STATUS_CONNECTED,
    MSG_WEBRTC_FAILED,
    STATUS_NEGOTIATING,
    STATUS_ERROR_TOKEN,
    STATUS_ERROR_DETAIL,
    STATUS_WAITING_REPLY,
    STATUS_FETCHING_TOKEN,
    STATUS_WAITING_CHANNEL,
)

from .base import TransportBase
from .subscriptions import Subscriptions, wait_for_ice_gathering

logger = logging.getLogger(__name__)

MicrophoneFactory = Callable[[], Any]


class WebRTCTransport(TransportBase):
    transport_id = TRANSPORT_WEBRTC

    def __init__(
        self,
        token_url: str,
        *,
        http_client: httpx.AsyncClient,
        base_url: str = DEFAULT_OPENAI_REALTIME_BASE_URL,
        peer_factory: Callable[[], Any] = RTCPeerConnection,
        microphone_factory: MicrophoneFactory | None = None,
        remote_media_factory: Callable[[], Any] = MediaBlackhole,
        ice_timeout_s: float = ICE_GATHERING_TIMEOUT_S,
        audio_sink: AudioSink | None = None,
        clock: Callable[[], float] = now_ms,
    ) -> None:
        super().__init__(audio_sink=audio_sink, clock=clock)
        self._token_url = token_url
        self._http = http_client
        self._base_url = base_url
        self._peer_factory = peer_factory
        self._microphone_factory = microphone_factory
        self._remote_media_factory = remote_media_factory
        self._ice_timeout_s = ice_timeout_s
        self._subs = Subscriptions()
        self._pc: Any = None
        self._channel: Any = None
        self._local_track: Any = None
        self._remote_media: Any = None

    async def start(self) -> bool:
        """Negotiate a new peer connection; returns False when any step fails."""
        if self._pc is not None:
            await self._release()
        session = self._renew_session()
        session.status = STATUS_FETCHING_TOKEN

        try:
            token = await fetch_ephemeral_token(self._http, self._token_url)
        except RelayError:
            logger.exception("ephemeral token request failed")
            append_message(session, ROLE_ERROR, MSG_TOKEN_FAILED)
            session.status = STATUS_ERROR_TOKEN
            return False

        try:
            pc = self._peer_factory()
            self._pc = pc
            self._phase = Connecting(handle=pc)
            self._remote_media = self._remote_media_factory()

            channel = pc.createDataChannel(DATA_CHANNEL_LABEL)
            self._channel = channel
            self._subs.on(channel, "open", self._on_channel_open)
            self._subs.on(channel, "message", self._on_channel_message)
            self._subs.on(channel, "close", self._on_channel_close)
            self._subs.on(pc, "track", self._on_track)

            self._add_audio_transceiver(pc)

            offer = await pc.createOffer()
            await pc.setLocalDescription(offer)
            await wait_for_ice_gathering(pc, self._ice_timeout_s)
            local = pc.localDescription
            if local is None or not local.sdp:
                raise UpstreamUnreachable("local SDP offer is missing")

            session.status = STATUS_NEGOTIATING
            answer_sdp = await exchange_sdp(self._http, self._base_url, token=token, offer_sdp=local.sdp)
            await pc.setRemoteDescription(RTCSessionDescription(sdp=answer_sdp, type="answer"))
            await self._remote_media.start()
        except Exception:
            logger.exception("WebRTC negotiation failed")
            append_message(session, ROLE_ERROR, MSG_WEBRTC_FAILED)
            await self._release()
            self._mark_closed(STATUS_ERROR_DETAIL)
            return False

        session.status = STATUS_WAITING_CHANNEL
        return True

    async def stop(self) -> None:
        self._session.manual_stop = self.is_active
        await self._release()
        self._mark_closed(STATUS_IDLE)

    async def send_event(self, event: dict[str, Any]) -> bool:
        phase = self._phase
        if not isinstance(phase, Bridged) or phase.handle.readyState != "open":
            return False
        phase.handle.send(dump_event(event))
        return True

    async def send_text(self, text: str) -> bool:
        message = text.strip()
        if not message or not isinstance(self._phase, Bridged):
            return False
        client_message_id, entry = self._open_turn(message)
        if not await self.send_event(build_response_create_event(message, client_message_id)):
            self._abort_turn(client_message_id, entry)
            return False
        self._session.status = STATUS_WAITING_REPLY
        return True

    def _add_audio_transceiver(self, pc: Any) -> None:
        track = None
        if self._microphone_factory is not None:
            try:
                track = self._microphone_factory()
            except Exception:
                logger.warning("microphone unavailable; continuing receive-only", exc_info=True)
        if track is None:
            pc.addTransceiver("audio", direction="recvonly")
            return
        self._local_track = track
        pc.addTransceiver(track, direction="sendrecv")

    def _on_track(self, track: Any) -> None:
        if track.kind == "audio" and self._remote_media is not None:
            self._remote_media.addTrack(track)

    def _on_channel_open(self) -> None:
        if self._channel is None:
            return
        self._phase = Bridged(handle=self._channel)
        self._session.is_ready = True
        self._session.status = STATUS_CONNECTED
        logger.info("WebRTC data channel open")

    def _on_channel_message(self, message: str | bytes) -> None:
        self._classifier.handle_frame(self._session, message)

    async def _on_channel_close(self) -> None:
        logger.info("WebRTC data channel closed")
        status = STATUS_IDLE if self._session.manual_stop else STATUS_CLOSED
        await self._release()
        self._mark_closed(status)

    async def _release(self) -> None:
        self._subs.release()
        pc, self._pc = self._pc, None
        channel, self._channel = self._channel, None
        track, self._local_track = self._local_track, None
        remote, self._remote_media = self._remote_media, None
        if isinstance(self._phase, Connecting | Bridged):
            self._phase = Closed(reason="released")
        if channel is not None:
            with contextlib.suppress(Exception):
                channel.close()
        if track is not None:
            with contextlib.suppress(Exception):
                track.stop()
        if remote is not None:
            with contextlib.suppress(Exception):
                await remote.stop()
        if pc is not None:
            with contextlib.suppress(Exception):
                await pc.close()


__all__ = ["WebRTCTransport"]
