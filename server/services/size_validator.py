"""Resolves the untrusted ``size`` query parameter into an in-bounds byte count."""

from typing import Optional

from common.logging_config import get_logger
from common.types import TransferRequest
from server.config import TransferSettings
from server.exceptions import InvalidSizeError

logger = get_logger(__name__)


def _parse_int(raw: str) -> Optional[int]:
    text = raw.strip()
    if not text:
        return None
    digits = text[1:] if text[0] in "+-" else text
    if not (digits.isascii() and digits.isdigit()):
        return None
    return int(text)


def resolve_size(raw: Optional[str], settings: TransferSettings) -> TransferRequest:
    """
    Turn the raw ``size`` parameter into a TransferRequest.

    Missing, non-numeric and out-of-range values fall back to the default
    size. In strict mode the last two raise InvalidSizeError instead.

    Args:
        raw: Query parameter value as received, or None if absent
        settings: Size bounds to validate against

    Returns:
        TransferRequest with min_size <= resolved_size <= max_size

    Raises:
        InvalidSizeError: Only when settings.strict_size is set
    """
    if raw is None:
        return TransferRequest(requested_size=None, resolved_size=settings.default_size, used_default=True)

    parsed = _parse_int(raw)

    if parsed is not None and settings.min_size <= parsed <= settings.max_size:
        return TransferRequest(requested_size=raw, resolved_size=parsed)

    if settings.strict_size:
        raise InvalidSizeError(
            f"size must be an integer between {settings.min_size} and {settings.max_size}, got {raw!r}"
        )

    logger.warning(
        f"Invalid or out-of-range size parameter: {raw!r}. "
        f"Falling back to default size {settings.default_size}"
    )
    return TransferRequest(requested_size=raw, resolved_size=settings.default_size, used_default=True)
