"""Turns provider fundamentals (strings such as "0.153", "12.5%", "None") into numbers."""
import math

from investfeed.schemas.scorecard import NormalizedMetric

SENTINELS = ("", "None")


def normalize(raw) -> float | None:
    """Numeric value of a raw fundamental, or None when missing/unparseable. Never raises."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip()
        if text in SENTINELS:
            return None
        if text.endswith("%"):
            text = text[:-1].rstrip()
        try:
            value = float(text)
        except ValueError:
            return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def normalize_metric(name: str, raw) -> NormalizedMetric:
    return NormalizedMetric(
        name=name,
        value=normalize(raw),
        raw=None if raw is None else str(raw),
    )
