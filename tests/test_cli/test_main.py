import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import structlog

from fbembed.main import build_parser, configure_logging, main, run
from fbembed.oembed.models import FetchFailure, OembedRecord

POST_URL = "https://www.facebook.com/example/posts/123"
RECORD = OembedRecord(
    author_name="A", width=560, height=315, url="https://www.facebook.com/x", html="<div/>"
)


def _patched_resolver(result):
    resolver = MagicMock()
    resolver.resolve = AsyncMock(return_value=result)
    resolver.__aenter__ = AsyncMock(return_value=resolver)
    resolver.__aexit__ = AsyncMock(return_value=False)
    return patch("fbembed.main.OembedResolver", return_value=resolver)


class TestBuildParser:
    def test_field_choices(self):
        args = build_parser().parse_args([POST_URL, "--field", "height"])
        assert args.input == POST_URL
        assert args.field == "height"

    def test_rejects_unknown_field(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([POST_URL, "--field", "thumbnail"])


@pytest.mark.asyncio
async def test_run_prints_field(capsys):
    with _patched_resolver(RECORD) as resolver_cls:
        code = await run(POST_URL, "width")

    assert code == 0
    assert capsys.readouterr().out.strip() == "560"
    resolver_cls.return_value.resolve.assert_awaited_once_with(POST_URL)


@pytest.mark.asyncio
async def test_run_prints_whole_record(capsys):
    with _patched_resolver(RECORD):
        code = await run(f"  {POST_URL}\n")

    assert code == 0
    assert json.loads(capsys.readouterr().out)["author_name"] == "A"


@pytest.mark.asyncio
async def test_run_no_facebook_url(capsys):
    with _patched_resolver(RECORD) as resolver_cls:
        code = await run("hello world", "width")

    assert code == 1
    assert "No Facebook URL" in capsys.readouterr().err
    resolver_cls.assert_not_called()


@pytest.mark.asyncio
async def test_run_fetch_failure(capsys):
    with _patched_resolver(FetchFailure(url=POST_URL, reason="timed out after 5s")):
        code = await run(POST_URL, "html")

    assert code == 1
    assert "Could not retrieve" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_run_absent_field(capsys):
    with _patched_resolver(OembedRecord(author_name="A")):
        code = await run(POST_URL, "width")

    assert code == 1
    assert "'width' not present" in capsys.readouterr().err


def test_main_wires_arguments():
    with (
        patch("fbembed.main.configure_logging") as configure,
        patch("fbembed.main.run", new=AsyncMock(return_value=0)) as run_mock,
    ):
        assert main([POST_URL, "--field", "url", "--log-level", "debug"]) == 0

    configure.assert_called_once_with("debug")
    run_mock.assert_awaited_once_with(POST_URL, "url")


def test_main_defaults_log_level_to_settings():
    with (
        patch("fbembed.main.configure_logging") as configure,
        patch("fbembed.main.run", new=AsyncMock(return_value=1)),
    ):
        assert main(["hello world"]) == 1

    configure.assert_called_once_with(None)


def test_configure_logging_writes_json_to_stderr():
    fake_stderr = MagicMock()
    fake_stderr.isatty.return_value = False
    try:
        with patch("fbembed.main.sys.stderr", fake_stderr):
            configure_logging("warning")
        config = structlog.get_config()
        assert isinstance(config["processors"][-1], structlog.processors.JSONRenderer)
        assert config["logger_factory"]._file is fake_stderr
    finally:
        structlog.reset_defaults()
