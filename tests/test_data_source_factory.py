import unittest

from tripcast.data_sources.base import CallableTravelDataSource
from tripcast.data_sources.factory import build_data_source


class DummySettings:
    def __init__(self, **kwargs):
        self.openweather_api_key = "k" * 32
        self.openweather_base_url = "https://weather.example"
        self.air_base_url = "http://air.example"
        self.http_timeout_seconds = 4.0
        for k, v in kwargs.items():
            setattr(self, k, v)


class TestDataSourceFactory(unittest.TestCase):
    def test_build_binds_credentials_and_endpoints(self):
        ds = build_data_source(DummySettings())
        self.assertIsInstance(ds, CallableTravelDataSource)
        self.assertEqual(ds.geocoder.keywords["api_key"], "k" * 32)
        self.assertEqual(ds.day_summary.keywords["base_url"], "https://weather.example")
        self.assertEqual(ds.air_forecast.keywords["base_url"], "http://air.example")
        self.assertEqual(ds.air_current.keywords["timeout"], 4.0)

    def test_missing_api_key_raises(self):
        with self.assertRaises(ValueError):
            build_data_source(DummySettings(openweather_api_key=""))


if __name__ == "__main__":
    unittest.main()
