import io
import logging

import pandas as pd

import main as cli
from dye_profile.config.settings import ConfigManager
from dye_profile.utils.logging import PACKAGE_LOGGER, LogManager


def _args(images, out, logs, *extra):
    return [
        "-n", "W", "--upper", "10", "--lower", "0", "-c", "r", "--blur-radius", "0",
        "-I", str(images), "-o", str(out), "--log-dir", str(logs), *extra,
    ]


def test_main_runs_pipeline_and_writes_log(tmp_path, make_group):
    images = tmp_path / "images"
    images.mkdir()
    make_group(images, "W", 250, sizes=((5, 3), (6, 3), (5, 4)))

    code = cli.main(_args(images, tmp_path / "out", tmp_path / "logs"))

    assert code == 0
    df = pd.read_csv(tmp_path / "out" / "W_250_Rness.csv")
    assert df["Distance (cm)"].tolist() == [10.0, 8.0, 6.0, 4.0, 2.0]

    logs = list((tmp_path / "logs").glob("W_log_*.txt"))
    assert len(logs) == 1
    text = logs[0].read_text(encoding="utf-8")
    assert "RPM: 250" in text


def test_main_returns_error_on_validation_failure(tmp_path, make_group):
    images = tmp_path / "images"
    images.mkdir()
    make_group(images, "W", 250)
    (images / "W_250_R3.png").unlink()

    assert cli.main(_args(images, tmp_path / "out", tmp_path / "logs")) == 1
    assert not list((tmp_path / "out").glob("*.csv"))


def test_main_rejects_bad_bounds(tmp_path):
    code = cli.main([
        "-n", "W", "--upper", "1", "--lower", "5", "-c", "G",
        "-I", str(tmp_path), "-o", str(tmp_path / "out"), "--no-log-file",
    ])
    assert code == 1


def test_prompt_missing_retries_until_valid(tmp_path):
    answers = iter([
        "W",
        "abc", "10",
        "12", "2",
        "x", "b",
        "-1", "3",
        str(tmp_path),
        str(tmp_path / "out"),
    ])
    manager = ConfigManager()
    manager.profile.clear()
    cli.prompt_missing(manager, input_func=lambda _msg: next(answers))

    config = manager.build_profile_config()
    assert config.distance_upper == 10.0
    assert config.distance_lower == 2.0
    assert config.channel.tag == "B"
    assert config.blur_radius == 3


def test_prompt_missing_reprompts_non_finite_bounds(tmp_path, capsys):
    answers = iter([
        "W",
        "nan", "inf", "10",
        "-inf", "nan", "0",
        "r", "0",
        str(tmp_path),
        str(tmp_path / "out"),
    ])
    manager = ConfigManager()
    manager.profile.clear()
    cli.prompt_missing(manager, input_func=lambda _msg: next(answers))

    config = manager.build_profile_config()
    assert config.distance_upper == 10.0
    assert config.distance_lower == 0.0
    assert capsys.readouterr().out.count("有限数值") == 4


def test_log_manager_releases_handlers(tmp_path):
    logger = logging.getLogger(PACKAGE_LOGGER)
    before = list(logger.handlers)
    stream = io.StringIO()

    class Cfg:
        def get(self, section, key=None, default=None):
            return {"level": "INFO", "log_to_file": True, "log_dir": str(tmp_path)}.get(key, default)

    try:
        with LogManager("SF", config=Cfg(), stream=stream) as log:
            log.logger.info("hello")
            raise RuntimeError("boom")
    except RuntimeError:
        pass

    assert logger.handlers == before
    assert logger.propagate is True
    assert "INFO: hello" in stream.getvalue()
    assert log.log_file.name.startswith("SF_log_")
    assert "hello" in log.log_file.read_text(encoding="utf-8")
