from pathlib import Path

from core import settings


def test_env_override_wins():
    result = settings.get_default_data_dir(
        settings.APP_NAME,
        platform="linux",
        env={settings.DATA_DIR_ENV: "/srv/habits", "XDG_DATA_HOME": "/tmp/xdg"},
        home=Path("/home/test"),
    )
    assert result == Path("/srv/habits")


def test_linux_data_dir_with_xdg():
    result = settings.get_default_data_dir(
        settings.APP_NAME,
        platform="linux",
        env={"XDG_DATA_HOME": "/tmp/xdg"},
        home=Path("/home/test"),
    )
    assert result == Path("/tmp/xdg") / settings.APP_NAME


def test_linux_data_dir_default_home():
    result = settings.get_default_data_dir(
        settings.APP_NAME,
        platform="linux",
        env={},
        home=Path("/home/test"),
    )
    assert result == Path("/home/test/.local/share") / settings.APP_NAME


def test_macos_data_dir():
    result = settings.get_default_data_dir(
        settings.APP_NAME,
        platform="darwin",
        env={},
        home=Path("/Users/test"),
    )
    assert result == Path("/Users/test/Library/Application Support") / settings.APP_NAME


def test_windows_data_dir_appdata():
    env = {"APPDATA": "C:/Users/test/AppData/Roaming"}
    result = settings.get_default_data_dir(
        settings.APP_NAME,
        platform="win32",
        env=env,
        home=Path("C:/Users/test"),
    )
    assert result == Path(env["APPDATA"]) / settings.APP_NAME


def test_runtime_paths_inside_data_dir():
    assert settings.DB_PATH.parent == settings.DATA_DIR
    assert settings.LOG_DIR.parent == settings.DATA_DIR
    assert settings.LOGGING.path.parent == settings.LOG_DIR


def test_engine_limits():
    assert settings.STREAKS.max_scan_days == 1000
    assert settings.STREAKS.max_weekly_weeks == 260
    assert settings.STREAKS.month_grid_days == 28
