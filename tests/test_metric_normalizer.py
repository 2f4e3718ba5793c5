import pytest

from investfeed.analysis.metric_normalizer import normalize, normalize_metric


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("0.153", 0.153),
        ("-0.02", -0.02),
        ("  1.75 ", 1.75),
        ("12.5%", 12.5),
        (3, 3.0),
        (0.5, 0.5),
        ("0", 0.0),
    ],
)
def test_numeric_values_are_parsed(raw, expected):
    """Numbers and numeric strings come back as floats"""
    assert normalize(raw) == pytest.approx(expected)


@pytest.mark.parametrize("raw", [None, "", "None", "N/A", "-", "abc", "NaN", "inf", True, {"a": 1}])
def test_missing_or_garbage_values_are_none(raw):
    """Sentinels and anything unparseable normalize to None without raising"""
    assert normalize(raw) is None


def test_normalize_metric_keeps_raw_text():
    """The raw provider text travels alongside the parsed value"""
    metric = normalize_metric("Profit Margin", "0.2")

    assert metric.name == "Profit Margin"
    assert metric.value == pytest.approx(0.2)
    assert metric.raw == "0.2"


def test_normalize_metric_missing_value():
    """A missing metric has neither value nor raw text"""
    metric = normalize_metric("Current Ratio", None)

    assert metric.value is None
    assert metric.raw is None
