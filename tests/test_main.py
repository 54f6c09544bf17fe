from unittest.mock import patch

from src import main


class TestRun:
    def test_serves_app_with_settings(self) -> None:
        with (
            patch.object(main.settings, "host", "127.0.0.1"),
            patch.object(main.settings, "port", 9001),
            patch.object(main.settings, "log_level", "debug"),
            patch.object(main.uvicorn, "run") as mock_run,
        ):
            main.run()
        mock_run.assert_called_once_with("src.main:app", host="127.0.0.1", port=9001, log_level="debug")
