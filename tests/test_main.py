"""Tests for the command line entry point."""

import json

import main as cli


def test_build_config_flags_override_env(monkeypatch, tmp_path):
    monkeypatch.setenv("CLOSET_FETCH_TIMEOUT", "3")
    monkeypatch.setenv("CLOSET_BACKEND_URL", "http://env-backend.test")
    args = cli.parse_args(
        ["https://shop.test/p/1", "--timeout", "7", "--output", str(tmp_path), "--mode", "backend"]
    )
    cfg = cli.build_config(args)

    assert cfg.fetch.timeout_seconds == 7
    assert cfg.fetch.backend_url == "http://env-backend.test"
    assert cfg.storage.base_dir == tmp_path
    assert args.mode == "backend"


def test_html_file_extraction(tmp_path, json_ld_page, capsys):
    page = tmp_path / "page.html"
    page.write_text(json_ld_page, encoding="utf-8")

    code = cli.main(["--html-file", str(page), "--base-url", "https://shop.test/p/1"])

    assert code == 0
    assert "Blue Hoodie" in capsys.readouterr().out


def test_missing_html_file(tmp_path):
    assert cli.main(["--html-file", str(tmp_path / "missing.html")]) == 1


def test_no_urls():
    assert cli.main([]) == 1


def test_html_file_saved_with_local(tmp_path, json_ld_page, capsys):
    page = tmp_path / "page.html"
    page.write_text(json_ld_page, encoding="utf-8")
    out_dir = tmp_path / "out"

    code = cli.main(
        ["--html-file", str(page), "--base-url", "https://shop.test/p/1", "--local", "-o", str(out_dir)]
    )

    assert code == 0
    saved = list((out_dir / "extracted").glob("*/*/metadata.json"))
    assert len(saved) == 1
    assert json.loads(saved[0].read_text())["title"] == "Blue Hoodie"
    assert json.loads(capsys.readouterr().out)["title"] == "Blue Hoodie"
