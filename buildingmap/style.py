"""Construction-period styling for building footprints."""

from .constants import BASE_COLOR, PERIOD_ALPHAS, FALLBACK_ALPHA
from .models import StyleResult

DEFAULT_STYLE = StyleResult(BASE_COLOR, FALLBACK_ALPHA)

_STYLES = {label: StyleResult(BASE_COLOR, alpha) for label, alpha in PERIOD_ALPHAS.items()}


def style_for(category) -> StyleResult:
    """Map a construction-period label to its fill style.

    Unknown labels (including "NA" and the empty string) get the
    near-transparent fallback.
    """
    if not isinstance(category, str):
        return DEFAULT_STYLE
    return _STYLES.get(category, DEFAULT_STYLE)
