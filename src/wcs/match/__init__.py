from .models import MatchContext, MatchResult
from .resolver import MatchResolver, STYLE_MATRIX, effective_skill, style_modifier, win_probability

__all__ = [
    "MatchContext",
    "MatchResolver",
    "MatchResult",
    "STYLE_MATRIX",
    "effective_skill",
    "style_modifier",
    "win_probability",
]
