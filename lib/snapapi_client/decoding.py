from __future__ import annotations

import json
import logging
from typing import Any

from .errors import DecodeError, ValidationError
from .result import Err, Ok, Result
from .transport import ResponseEnvelope
from .types import ResponseMode

log = logging.getLogger(__name__)


def decode(envelope: ResponseEnvelope, mode: ResponseMode | str | None = None) -> Result[Any, DecodeError | ValidationError]:
    """Convert a successful response body into the shape ``mode`` asks for.

    ``binary`` (also the default) hands back the raw bytes. ``base64`` and
    ``json`` both parse the body as JSON and return it as-is; for ``base64``
    the service already embeds the encoded payload in its JSON envelope.
    """
    try:
        resolved = ResponseMode.parse(mode)
    except ValidationError as e:
        return Err(e)
    if resolved is ResponseMode.BINARY:
        return Ok(envelope.content)

    try:
        return Ok(json.loads(envelope.content))
    except (ValueError, UnicodeDecodeError) as e:
        log.debug("response body is not valid JSON (mode=%s, status=%s)", resolved.value, envelope.status_code)
        return Err(
            DecodeError(
                f"Expected a JSON body for responseType {resolved.value!r}: {e}",
                mode=resolved.value,
                status_code=envelope.status_code,
            )
        )
