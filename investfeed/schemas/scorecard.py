from pydantic import BaseModel


class NormalizedMetric(BaseModel):
    name: str
    value: float | None = None  # None when missing or unparseable
    raw: str | None = None  # provider text, kept for display

    model_config = {"frozen": True}


class MetricScore(BaseModel):
    metric_name: str
    score: float = 0  # 0, half weight or full weight
    assessment: str = "N/A"  # Excellent, Good, Fair, Poor, Strong, Moderate, Low/Negative, ...
    value_representation: str = "N/A"

    model_config = {"frozen": True}


class Scorecard(BaseModel):
    ticker: str | None = None
    score: float = 0  # 0-100
    key_positives: tuple[str, ...] = ()
    key_negatives: tuple[str, ...] = ()
    summary_message: str = ""
    metrics: tuple[MetricScore, ...] = ()

    model_config = {"frozen": True}
