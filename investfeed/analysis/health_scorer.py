"""
Company health scorecard.

Six fundamentals from the company overview, each scored against fixed bands:

  Profitability (40):  Profit Margin 20, Return on Equity (TTM) 20
  Liquidity/debt (30): Current Ratio 15, Debt to Equity 15 (lower is better)
  Growth (30):         Quarterly Revenue Growth (YOY) 15, Quarterly Earnings Growth (YOY) 15

A metric is worth its full weight, a partial amount, or 0. Missing metrics are
reported as N/A and contribute 0; they are not redistributed, so the total is
always between 0 and 100.
"""
import logging
from typing import NamedTuple

from investfeed.analysis.metric_normalizer import normalize_metric
from investfeed.schemas.scorecard import MetricScore, Scorecard

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"
ALL_MISSING_SUMMARY = "Could not calculate health score due to missing data for all metrics."

PERCENT = "percent"
RATIO = "ratio"


class MetricRule(NamedTuple):
    name: str
    key: str  # company overview field
    display: str  # PERCENT or RATIO
    bands: list[tuple[float, float, str]]  # (threshold, score, label), checked in order
    floor: tuple[float, str]  # (score, label) when no band matches
    higher_is_better: bool = True
    positive_labels: tuple[str, ...] = ("Excellent", "Good", "Strong")
    negative_labels: tuple[str, ...] = ("Poor", "Low/Negative")


_MARGIN_BANDS = [(0.15, 20, "Excellent"), (0.05, 10, "Good"), (0, 5, "Fair")]
_GROWTH_BANDS = [(0.10, 15, "Strong"), (0, 7.5, "Moderate")]

METRIC_RULES = [
    MetricRule("Profit Margin", "ProfitMargin", PERCENT, _MARGIN_BANDS, (0, "Poor")),
    MetricRule("Return on Equity (TTM)", "ReturnOnEquityTTM", PERCENT, _MARGIN_BANDS, (0, "Poor")),
    MetricRule("Current Ratio", "CurrentRatio", RATIO, [(1.5, 15, "Good"), (1.0, 7.5, "Acceptable")], (0, "Poor")),
    MetricRule(
        "Debt to Equity",
        "DebtToEquity",
        RATIO,
        [(0.5, 15, "Low"), (1.0, 7.5, "Moderate")],
        (0, "High"),
        higher_is_better=False,
        positive_labels=("Low", "Moderate"),
        negative_labels=("High",),
    ),
    MetricRule("Quarterly Revenue Growth (YOY)", "QuarterlyRevenueGrowthYOY", PERCENT, _GROWTH_BANDS, (0, "Low/Negative")),
    MetricRule("Quarterly Earnings Growth (YOY)", "QuarterlyEarningsGrowthYOY", PERCENT, _GROWTH_BANDS, (0, "Low/Negative")),
]


def score_to_summary(score: float) -> str:
    if score >= 70:
        return "Overall financial health: Strong."
    elif score >= 50:
        return "Overall financial health: Moderate."
    elif score > 0:
        return "Overall financial health: Fair, with areas for improvement."
    else:
        return "Overall financial health: Weak, requires careful review."


def _format_value(value: float, display: str) -> str:
    if display == PERCENT:
        return f"{value * 100:.2f}%"
    return f"{value:.2f}"


def _band(rule: MetricRule, value: float) -> tuple[float, str]:
    for threshold, score, label in rule.bands:
        if rule.higher_is_better and value > threshold:
            return score, label
        if not rule.higher_is_better and value < threshold:
            return score, label
    return rule.floor


class HealthScorer:
    def __init__(self, rules: list[MetricRule] | None = None):
        self.rules = rules if rules is not None else METRIC_RULES

    def score(self, overview: dict, ticker: str | None = None) -> Scorecard:
        if ticker is None:
            symbol = overview.get("Symbol")
            ticker = symbol if symbol and symbol != NOT_AVAILABLE else None

        metrics = [self._score_metric(rule, overview.get(rule.key)) for rule in self.rules]
        total = sum(m.score for m in metrics)

        key_positives = []
        key_negatives = []
        for rule, ms in zip(self.rules, metrics):
            if ms.assessment == NOT_AVAILABLE:
                continue
            finding = f"{ms.metric_name}: {ms.value_representation} ({ms.assessment})"
            if ms.score > 0 and ms.assessment in rule.positive_labels:
                key_positives.append(finding)
            elif ms.assessment in rule.negative_labels:
                key_negatives.append(finding)

        if all(m.assessment == NOT_AVAILABLE for m in metrics):
            summary = ALL_MISSING_SUMMARY
        else:
            summary = score_to_summary(total)

        logger.info(f"Calculated health score for {ticker or 'unknown symbol'}: {total}")
        return Scorecard(
            ticker=ticker,
            score=total,
            key_positives=key_positives,
            key_negatives=key_negatives,
            summary_message=summary,
            metrics=metrics,
        )

    def _score_metric(self, rule: MetricRule, raw) -> MetricScore:
        metric = normalize_metric(rule.name, raw)
        if metric.value is None:
            logger.debug(f"Metric '{rule.name}' is N/A (raw value {raw!r})")
            return MetricScore(metric_name=rule.name, score=0, assessment=NOT_AVAILABLE, value_representation=NOT_AVAILABLE)
        score, label = _band(rule, metric.value)
        return MetricScore(
            metric_name=rule.name,
            score=score,
            assessment=label,
            value_representation=_format_value(metric.value, rule.display),
        )
