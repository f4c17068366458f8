"""HTTP handler for ephemeral credential issuance."""

from __future__ import annotations

import logging

from fastapi.responses import ORJSONResponse

from realtime_relay.state import RuntimeDeps
from realtime_relay.config.messages import MSG_SESSION_FAILED, MSG_SESSION_REJECTED
from realtime_relay.errors import UpstreamRejected, ConfigurationError, UpstreamUnreachable

logger = logging.getLogger(__name__)


async def issue_ephemeral_token(runtime_deps: RuntimeDeps) -> ORJSONResponse:
    try:
        session = await runtime_deps.issuer.create_ephemeral_session()
    except ConfigurationError as exc:
        logger.error("ephemeral token refused: %s", exc)
        return ORJSONResponse({"error": exc.message}, status_code=500)
    except UpstreamRejected as exc:
        logger.error("ephemeral session rejected status=%s details=%s", exc.status_code, exc.details)
        return ORJSONResponse(
            {"error": MSG_SESSION_REJECTED, "details": exc.details},
            status_code=exc.status_code,
        )
    except UpstreamUnreachable as exc:
        logger.error("ephemeral session request failed: %s", exc, exc_info=exc.__cause__ is not None)
        return ORJSONResponse({"error": MSG_SESSION_FAILED}, status_code=500)
    except Exception:
        logger.exception("ephemeral session request failed unexpectedly")
        return ORJSONResponse({"error": MSG_SESSION_FAILED}, status_code=500)
    return ORJSONResponse(session.to_payload())


__all__ = ["issue_ephemeral_token"]
