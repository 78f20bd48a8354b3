import unittest

from advice_errors import ConfigurationError
from advice_settings import DEFAULT_MODEL, Settings


class SettingsTests(unittest.TestCase):
    def test_defaults(self):
        settings = Settings.from_env({"GEMINI_API_KEY": "abc"})
        self.assertEqual(settings.api_key, "abc")
        self.assertEqual(settings.model, DEFAULT_MODEL)
        self.assertEqual(settings.timeout, 30.0)
        self.assertEqual(settings.port, 5000)
        self.assertFalse(settings.debug)
        self.assertEqual(settings.cors_origins, ("*",))

    def test_missing_key(self):
        for env in ({}, {"GEMINI_API_KEY": "  "}):
            with self.assertRaises(ConfigurationError) as ctx:
                Settings.from_env(env)
            self.assertEqual(str(ctx.exception), "API key is missing. Check your .env file.")

    def test_key_optional_when_not_required(self):
        self.assertIsNone(Settings.from_env({}, require_api_key=False).api_key)

    def test_overrides(self):
        settings = Settings.from_env({
            "GEMINI_API_KEY": "abc",
            "GEMINI_MODEL": "gemini-pro",
            "GEMINI_API_BASE": "http://localhost:9000/v1/",
            "GEMINI_TIMEOUT": "2.5",
            "PORT": "8081",
            "DEBUG": "TRUE",
            "CORS_ORIGINS": "http://a.test, http://b.test",
        })
        self.assertEqual(settings.timeout, 2.5)
        self.assertEqual(settings.port, 8081)
        self.assertTrue(settings.debug)
        self.assertEqual(settings.cors_origins, ("http://a.test", "http://b.test"))
        self.assertEqual(settings.model, "gemini-pro")
        self.assertEqual(settings.api_base, "http://localhost:9000/v1/")

    def test_bad_numbers(self):
        for env in ({"GEMINI_TIMEOUT": "soon"}, {"GEMINI_TIMEOUT": "0"}, {"PORT": "http"}):
            env["GEMINI_API_KEY"] = "abc"
            with self.assertRaises(ConfigurationError):
                Settings.from_env(env)


if __name__ == "__main__":
    unittest.main()
