# tests/core/test_cli.py
import json
from unittest.mock import AsyncMock, patch

import pytest

from idx_wrapper.cli import _output_name, main
from idx_wrapper.model import WrapFailure


@pytest.fixture
def mock_controller():
    with patch('idx_wrapper.cli.configure_logger'), \
            patch('idx_wrapper.cli.WrapController') as mock_controller_class:
        instance = mock_controller_class.return_value
        instance.wrap = AsyncMock(return_value="<html>wrapped</html>")
        yield instance


def test_wrap_to_file(mock_controller, tmp_path):
    """'wrap' schrijft de wrapper naar het opgegeven bestand."""
    output = tmp_path / "wrapper.html"
    exit_code = main([
        "wrap", "--site", "http://example.com/", "--target", "class", "--class", "main",
        "--remove-conflicts", "-o", str(output)
    ])

    assert exit_code == 0
    assert output.read_text(encoding="utf-8") == "<html>wrapped</html>"

    wrap_request = mock_controller.wrap.call_args.args[0]
    assert wrap_request.css_class == "main"
    assert wrap_request.remove_conflicts is True
    assert wrap_request.h1_ignore is False


def test_wrap_to_stdout(mock_controller, capsys):
    exit_code = main(["wrap", "--site", "http://example.com", "--target", "id", "--id", "content"])
    assert exit_code == 0
    assert capsys.readouterr().out == "<html>wrapped</html>"


def test_wrap_failure(mock_controller, capsys):
    """Een mislukte fetch geeft exit code 1 en het foutobject op stderr."""
    mock_controller.wrap.return_value = WrapFailure(site_requested="http://example.com")
    exit_code = main(["wrap", "--site", "http://example.com", "--target", "id", "--id", "content"])

    assert exit_code == 1
    assert json.loads(capsys.readouterr().err)["siteRequested"] == "http://example.com"


def test_batch(mock_controller, tmp_path):
    """'batch' maakt een bestand per geslaagde job."""
    jobs_file = tmp_path / "jobs.json"
    jobs_file.write_text(json.dumps([
        {"site": "http://a.example.com/", "target": "id", "id": "content"},
        {"site": "http://b.example.com/", "target": "id", "id": "content"},
        {"target": "id", "id": "content"},
    ]))
    mock_controller.wrap.side_effect = [
        "<html>a</html>",
        WrapFailure(site_requested="http://b.example.com/"),
    ]
    out_dir = tmp_path / "out"

    exit_code = main(["batch", str(jobs_file), "--out-dir", str(out_dir)])

    assert exit_code == 1
    assert [p.name for p in out_dir.iterdir()] == ["001_a.example.com.html"]
    assert (out_dir / "001_a.example.com.html").read_text(encoding="utf-8") == "<html>a</html>"


def test_batch_with_invalid_jobs_file(mock_controller, tmp_path):
    jobs_file = tmp_path / "jobs.json"
    jobs_file.write_text('{"site": "http://a.example.com"}')
    assert main(["batch", str(jobs_file), "--out-dir", str(tmp_path / "out")]) == 1


def test_output_name():
    assert _output_name("https://www.example.com/homes/", 7) == "007_www.example.com_homes.html"


def test_logging_is_configured_from_settings(tmp_path):
    """De CLI geeft de logniveaus uit settings.json door aan configure_logger."""
    with patch('idx_wrapper.cli.configure_logger') as mock_configure, \
            patch('idx_wrapper.cli.WrapController') as mock_controller_class:
        mock_controller_class.return_value.wrap = AsyncMock(return_value="<html></html>")
        main([
            "--log-level", "DEBUG", "wrap", "--site", "http://example.com", "--target", "id",
            "--id", "content", "-o", str(tmp_path / "out.html")
        ])

    args, kwargs = mock_configure.call_args
    assert args == ("DEBUG",)
    assert kwargs["module_specific_levels"] == {"idx_wrapper.services": "INFO"}
    assert kwargs["silenced_loggers"] == {"aiohttp.access": "WARNING", "werkzeug": "WARNING"}
