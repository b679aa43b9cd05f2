"""Mode-keyed environment configuration steps."""

from .models import Mode, ModeContext, ModeRequest, ModeResult, parse_mode
from .modes import MODE_HANDLERS, dispatch, parse_codename

__all__ = [
    "Mode",
    "ModeContext",
    "ModeRequest",
    "ModeResult",
    "parse_mode",
    "MODE_HANDLERS",
    "dispatch",
    "parse_codename",
]
