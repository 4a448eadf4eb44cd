import pytest

from tripcast.advice import (
    air_alerts,
    canonical_pollutant,
    packing_advice,
    packing_band,
    pollution_alerts,
)
from tripcast.domain import DaySummary, PackingBand


def _days(*temps, rain=0.0):
    return [DaySummary(day=f"2025-01-0{i + 1}", temp_avg_c=t, rain_mm=rain) for i, t in enumerate(temps)]


@pytest.mark.parametrize(
    "mean, band",
    [
        (7.9, PackingBand.COLD),
        (8.0, PackingBand.MILD),
        (24.0, PackingBand.MILD),
        (24.1, PackingBand.HOT),
        (None, PackingBand.UNKNOWN),
    ],
)
def test_packing_band_boundaries(mean, band):
    assert packing_band(mean) is band


def test_packing_advice_ignores_null_days():
    advice = packing_advice(_days(10.0, None, 20.0))
    assert advice.mean_temp_c == 15.0
    assert advice.packing is PackingBand.MILD
    assert advice.umbrella is False


def test_packing_advice_unknown_without_temperatures():
    advice = packing_advice(_days(None, None))
    assert advice.mean_temp_c is None
    assert advice.packing is PackingBand.UNKNOWN


def test_umbrella_when_any_day_has_rain():
    days = _days(10.0, 11.0)
    days[1] = days[1].model_copy(update={"rain_mm": 0.1})
    assert packing_advice(days).umbrella is True


def test_canonical_pollutant_names():
    assert canonical_pollutant("pm2_5") == "PM25"
    assert canonical_pollutant("o3") == "O3"


def test_threshold_is_exclusive():
    assert pollution_alerts({"pm2_5": 12.0}) == []


def test_alert_just_over_threshold():
    (alert,) = pollution_alerts({"pm2_5": 12.1})
    assert alert.pollutant == "PM25"
    assert alert.value == 12.1
    assert alert.good_max == 12
    assert alert.over == 0.1
    assert alert.percent_of_good == 101
    assert alert.elevation == "0.1 µg/m³ (~101% of 'Good' max)"
    assert "lungs" in alert.risk


def test_only_breaching_pollutants_alert():
    alerts = pollution_alerts({"pm2_5": 15.3, "o3": 40})
    assert [a.pollutant for a in alerts] == ["PM25"]


def test_alert_order_follows_threshold_table():
    alerts = pollution_alerts({"co": 5000, "o3": 90, "pm10": 60, "nh3": 500, "no": 900})
    assert [a.pollutant for a in alerts] == ["PM10", "O3", "CO"]


def test_canonical_input_keys_are_accepted():
    alerts = pollution_alerts({"PM25": 20, "NO2": "60.5"})
    assert [a.pollutant for a in alerts] == ["PM25", "NO2"]
    assert alerts[1].value == 60.5


def test_missing_or_non_numeric_components():
    assert pollution_alerts(None) == []
    assert pollution_alerts({"pm10": None, "so2": "high"}) == []


def test_air_alerts_per_day():
    out = air_alerts({"2025-01-01": {"so2": 40.0}, "2025-01-02": {"so2": 10.0}})
    assert list(out) == ["2025-01-01", "2025-01-02"]
    assert out["2025-01-01"][0].pollutant == "SO2"
    assert out["2025-01-01"][0].value_max == 40.0
    assert out["2025-01-01"][0].percent_of_good == 114
    assert out["2025-01-02"] == []
