"""Tests for radiator.cli -- config building and subcommand dispatch."""

import argparse
import json
from unittest.mock import patch

import pytest
import requests
from conftest import FAIL, OK, make_job

from radiator.cli import STATUS_ERROR, STATUS_OK, _build_config, main


def view_args(**overrides):
    values = {
        "exclude": "",
        "no_group": False,
        "pipeline_only": False,
        "hide_stable": False,
        "caption": "",
        "caption_size": 36,
    }
    values.update(overrides)
    return argparse.Namespace(**values)


def run_main(monkeypatch, *argv):
    monkeypatch.setattr("sys.argv", ["radiator", *argv])
    with pytest.raises(SystemExit) as exc:
        main()
    return exc.value.code


# ---------------------------------------------------------------------------
# _build_config
# ---------------------------------------------------------------------------

class TestBuildConfig:
    def test_defaults(self):
        config = _build_config(view_args())
        assert config.group_by_prefix
        assert config.exclude_regex is None
        assert config.show_stable

    def test_flags(self):
        config = _build_config(view_args(
            exclude="old_.*", no_group=True, pipeline_only=True,
            hide_stable=True, caption="CI", caption_size="20",
        ))
        assert not config.group_by_prefix
        assert config.exclude_regex == "old_.*"
        assert config.pipeline_only
        assert not config.show_stable
        assert config.caption_text == "CI"
        assert config.caption_size == 20

    def test_invalid_regex(self):
        with pytest.raises(ValueError):
            _build_config(view_args(exclude="("))


# ---------------------------------------------------------------------------
# main
# ---------------------------------------------------------------------------

class TestJenkinsCommand:
    def test_prints_board(self, monkeypatch, capsys):
        jobs = [make_job("build_a", FAIL), make_job("build_b", OK)]
        with patch("radiator.jenkins.fetch_items", return_value=jobs), \
             patch("radiator.jenkins.fetch_queue", return_value=[]), \
             patch("radiator.jenkins.claims_available", return_value=True):
            code = run_main(monkeypatch, "jenkins", "--url", "https://ci.example.com")
        assert code == STATUS_OK
        out = capsys.readouterr().out
        assert "build (failing)" in out
        assert "build_a" in out

    def test_writes_json(self, monkeypatch, tmp_path):
        out = tmp_path / "board.json"
        with patch("radiator.jenkins.fetch_items", return_value=[make_job("a_b", OK)]), \
             patch("radiator.jenkins.fetch_queue", return_value=[]), \
             patch("radiator.jenkins.claims_available", return_value=False):
            code = run_main(monkeypatch, "jenkins", "--url", "https://ci.example.com",
                            "--json", str(out), "--no-group")
        assert code == STATUS_OK
        data = json.loads(out.read_text())
        assert [c["name"] for c in data["children"]] == ["a_b"]
        assert data["children"][0]["claim"] is None
        assert data["view"]["group_by_prefix"] is False

    def test_request_failure(self, monkeypatch):
        with patch("radiator.jenkins.fetch_items",
                   side_effect=requests.ConnectionError("refused")):
            code = run_main(monkeypatch, "jenkins", "--url", "https://ci.example.com")
        assert code == STATUS_ERROR

    def test_invalid_exclude(self, monkeypatch):
        code = run_main(monkeypatch, "jenkins", "--url", "https://ci.example.com",
                        "--exclude", "[")
        assert code == STATUS_ERROR

    def test_url_required(self, monkeypatch):
        assert run_main(monkeypatch, "jenkins") == 2


class TestGithubCommand:
    def test_prints_board(self, monkeypatch, capsys):
        jobs = [make_job("ci", OK, pipeline=True)]
        with patch("radiator.github.list_workflow_jobs", return_value=jobs) as mock_list:
            code = run_main(monkeypatch, "github", "--repo", "o/r", "--branch", "")
        assert code == STATUS_OK
        mock_list.assert_called_once_with("o/r", None, 20)
        assert "[SUCCESSFUL] ci" in capsys.readouterr().out

    def test_missing_token(self, monkeypatch):
        with patch("radiator.github.list_workflow_jobs",
                   side_effect=RuntimeError("GitHub token not found")):
            code = run_main(monkeypatch, "github", "--repo", "o/r")
        assert code == STATUS_ERROR


class TestVersion:
    def test_version_flag(self, monkeypatch, capsys):
        assert run_main(monkeypatch, "--version") == 0
        assert "radiator" in capsys.readouterr().out
