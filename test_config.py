#!/usr/bin/env python3
"""Tests for environment-driven viewer settings."""

import logging
import unittest

from config import DEFAULT_FEED_URL, ViewerSettings
from feed.session import SessionController


class ViewerSettingsTests(unittest.TestCase):
    def test_defaults_without_environment(self):
        settings = ViewerSettings.from_env({})
        self.assertEqual(settings, ViewerSettings())
        self.assertEqual(settings.feed_url, DEFAULT_FEED_URL)
        self.assertEqual(settings.inference_mode, "observed")

    def test_overrides(self):
        settings = ViewerSettings.from_env({
            "TRAFFIC_VIEW_TOPOLOGY_URL": "http://sim:9000/api/map/layout",
            "TRAFFIC_VIEW_HTTP_TIMEOUT_S": "2.5",
            "TRAFFIC_VIEW_INFERENCE_MODE": "Evidence",
            "TRAFFIC_VIEW_FPS": "30",
            "TRAFFIC_VIEW_LOG_LEVEL": "debug",
        })
        self.assertEqual(settings.topology_url, "http://sim:9000/api/map/layout")
        self.assertEqual(settings.http_timeout_s, 2.5)
        self.assertEqual(settings.inference_mode, "evidence")
        self.assertEqual(settings.fps, 30)
        self.assertEqual(settings.log_level_value, logging.DEBUG)

    def test_invalid_values_fall_back(self):
        with self.assertLogs("config", level="WARNING"):
            settings = ViewerSettings.from_env({"TRAFFIC_VIEW_WIDTH": "wide"})
        self.assertEqual(settings.width, ViewerSettings().width)

    def test_unknown_inference_mode_falls_back(self):
        with self.assertLogs("config", level="WARNING"):
            settings = ViewerSettings.from_env({"TRAFFIC_VIEW_INFERENCE_MODE": "evidance"})
        self.assertEqual(settings.inference_mode, "observed")
        # The session builds its inference engine from the fallback value.
        session = SessionController(settings, topology_client=object())
        self.assertEqual(session.state.inference_mode.value, "observed")

    def test_drop_rate_is_clamped(self):
        self.assertEqual(ViewerSettings.from_env({"TRAFFIC_VIEW_DROP_RATE": "4"}).drop_rate, 1.0)
        self.assertEqual(ViewerSettings.from_env({"TRAFFIC_VIEW_DROP_RATE": "-1"}).drop_rate, 0.0)

    def test_unknown_log_level_defaults_to_info(self):
        settings = ViewerSettings.from_env({"TRAFFIC_VIEW_LOG_LEVEL": "chatty"})
        self.assertEqual(settings.log_level_value, logging.INFO)


if __name__ == "__main__":
    unittest.main()
