import json

import pytest

from tripcast.checklist import build_checklist_messages, extract_json_object, parse_checklist
from tripcast.domain import Advice, DayAirIndex, DaySummary, Location, PackingBand
from tripcast.errors import MalformedLLMOutput


def _inputs():
    location = Location(lat=53.35, lon=-6.26, name="Dublin", country="IE")
    days = [
        DaySummary(day="2025-01-01", temp_avg_c=6.0, wind_max_ms=8.0, rain_mm=2.0),
        DaySummary(day="2025-01-02", temp_avg_c=None, wind_max_ms=0.0, rain_mm=0.0),
    ]
    advice = Advice(umbrella=True, packing=PackingBand.COLD, mean_temp_c=6.0)
    air = [DayAirIndex(day="2025-01-01", aqi_max=2), DayAirIndex(day="2025-01-02", aqi_max=None)]
    return location, days, advice, air


def test_build_messages_embeds_aggregated_data():
    msgs = build_checklist_messages(*_inputs())
    assert [m["role"] for m in msgs] == ["system", "user"]
    content = msgs[1]["content"]
    assert "next 2 days" in content
    assert '"city": "Dublin"' in content
    assert '"packing": "Cold"' in content
    assert '"aqi_max": null' in content


def test_extract_plain_json():
    assert extract_json_object('{"checklist": ["coat"], "notes": "cold"}') == {"checklist": ["coat"], "notes": "cold"}


def test_extract_from_fenced_block():
    text = "```json\n{\"checklist\": [\"umbrella\"], \"notes\": \"wet\"}\n```"
    assert extract_json_object(text)["checklist"] == ["umbrella"]


def test_extract_first_object_amid_commentary():
    payload = {"checklist": ["scarf", "gloves"], "notes": "Chilly {mornings}."}
    text = f"Sure! Here is your list: {{not json}} then {json.dumps(payload)} Enjoy {{\"x\": 1}}"
    assert extract_json_object(text) == payload


def test_extract_raises_without_object():
    with pytest.raises(MalformedLLMOutput):
        extract_json_object("Pack a coat and an umbrella.")
    with pytest.raises(MalformedLLMOutput):
        extract_json_object('["not", "an", "object"]')


def test_parse_checklist_falls_back_to_raw_notes():
    result = parse_checklist("  Pack a coat and an umbrella.  ")
    assert result.checklist == []
    assert result.notes == "Pack a coat and an umbrella."


def test_parse_checklist_sanitizes_fields():
    result = parse_checklist('{"checklist": "coat", "notes": 42}')
    assert result.checklist == []
    assert result.notes == ""


def test_parse_checklist_happy_path():
    result = parse_checklist('{"checklist": ["coat", "hat"], "notes": "Cold and wet."}')
    assert result.checklist == ["coat", "hat"]
    assert result.notes == "Cold and wet."
