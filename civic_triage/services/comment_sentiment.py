"""
Comment sentiment - lexicon-based tone of citizen comments.

Counts positive and negative words; score is (pos - neg) / (pos + neg).
Good enough to surface frustrated threads on the admin dashboard.
"""

import re

from civic_triage.models.analytics import SentimentResult

POSITIVE_WORDS = frozenset({
    "good", "great", "excellent", "thanks", "appreciate", "helpful", "quick", "efficient",
})
NEGATIVE_WORDS = frozenset({
    "bad", "terrible", "awful", "slow", "useless", "waste", "never", "failed",
})

NEUTRAL_BAND = 0.3

_NON_WORD = re.compile(r"\W+")


def analyze_sentiment(text: str) -> SentimentResult:
    words = [w for w in _NON_WORD.split((text or "").lower()) if w]
    positive = sum(1 for w in words if w in POSITIVE_WORDS)
    negative = sum(1 for w in words if w in NEGATIVE_WORDS)

    total = positive + negative
    score = (positive - negative) / total if total else 0.0

    if score > 0:
        label = "positive"
    elif score < 0:
        label = "negative"
    else:
        label = "neutral"

    return SentimentResult(
        sentiment=label,
        score=round(score, 4),
        positive_words=positive,
        negative_words=negative,
        is_positive=score > NEUTRAL_BAND,
        is_negative=score < -NEUTRAL_BAND,
        is_neutral=-NEUTRAL_BAND <= score <= NEUTRAL_BAND,
    )
