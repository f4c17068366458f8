"""User-visible message and status strings.

These reach the browser verbatim, so they stay in the UI language.
"""

from __future__ import annotations

# Server-side boundary messages
MSG_MISSING_API_KEY = "伺服器缺少 OPENAI_API_KEY"
MSG_SESSION_REJECTED = "建立短效會話失敗"
MSG_SESSION_FAILED = "建立短效會話時發生錯誤"
MSG_UPSTREAM_FAILED = "OpenAI 即時連線失敗。"
STATUS_UPSTREAM_CONNECTED = "已連線至 OpenAI"
STATUS_UPSTREAM_CLOSED = "OpenAI 連線已關閉"

# Transport status labels (advisory only)
STATUS_IDLE = "待命"
STATUS_CONNECTING = "連線中…"
STATUS_CONNECTED = "已連線"
STATUS_READY = "已連線（語音就緒）"
STATUS_FETCHING_TOKEN = "取得金鑰中…"
STATUS_NEGOTIATING = "協商中…"
STATUS_WAITING_CHANNEL = "等待資料通道…"
STATUS_WAITING_REPLY = "等待語音回覆…"
STATUS_CLOSED = "已關閉"
STATUS_ERROR = "錯誤"
STATUS_ERROR_TOKEN = "錯誤（金鑰）"
STATUS_ERROR_DETAIL = "錯誤（詳見主控台）"

# Conversation log messages
MSG_UNKNOWN_REALTIME_ERROR = "發生未知的即時錯誤"
MSG_RESPONSE_FAILED = "模型無法產生回覆。"
MSG_TOKEN_FAILED = "取得短效金鑰失敗"
MSG_TOKEN_MISSING_SECRET = "短效金鑰回應缺少 client secret"
MSG_WEBRTC_FAILED = "WebRTC 協商失敗"
MSG_WS_CONNECT_FAILED = "無法連線至即時伺服器"
MSG_AUDIO_TURN_PLACEHOLDER = "（語音訊息）"
MSG_AUDIO_TURN_EMPTY = "本次語音訊息沒有偵測到聲音，已取消送出。"

__all__ = [
    "MSG_AUDIO_TURN_EMPTY",
    "MSG_AUDIO_TURN_PLACEHOLDER",
    "MSG_MISSING_API_KEY",
    "MSG_RESPONSE_FAILED",
    "MSG_SESSION_FAILED",
    "MSG_SESSION_REJECTED",
    "MSG_TOKEN_FAILED",
    "MSG_TOKEN_MISSING_SECRET",
    "MSG_UNKNOWN_REALTIME_ERROR",
    "MSG_UPSTREAM_FAILED",
    "MSG_WEBRTC_FAILED",
    "MSG_WS_CONNECT_FAILED",
    "STATUS_CLOSED",
    "STATUS_CONNECTED",
    "STATUS_CONNECTING",
    "STATUS_ERROR",
    "STATUS_ERROR_DETAIL",
    "STATUS_ERROR_TOKEN",
    "STATUS_FETCHING_TOKEN",
    "STATUS_IDLE",
    "STATUS_NEGOTIATING",
    "STATUS_READY",
    "STATUS_UPSTREAM_CLOSED",
    "STATUS_UPSTREAM_CONNECTED",
    "STATUS_WAITING_CHANNEL",
    "STATUS_WAITING_REPLY",
]
