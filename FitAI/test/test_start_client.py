"""
Tests for the terminal front end and command-line entry point.
"""

import json
import warnings
from pathlib import Path

import pytest

import FitAI
from FitAI.__main__ import parse
from FitAI.config import Config
from FitAI.core.client.auth import FormFields, FormMode, FormState, RequestStatus, ResultMessage
from FitAI.start import client as start_client
from FitAI.start.client import render_state, run_form


class TestRenderState:
    """Tests for drawing the form as text."""

    def test_login_form(self):
        state = FormState(fields=FormFields(username="Jo", email="jo@example.com", password="pw"))

        text = render_state(state)

        assert "[Login]" in text
        assert "jo@example.com" in text
        assert "Jo" not in text.replace("jo@example.com", "")
        assert "pw" not in text
        assert "< Login >" in text

    def test_signup_form_shows_all_fields(self):
        state = FormState(mode=FormMode.SIGNUP, fields=FormFields(username="Jo"))

        text = render_state(state)

        assert "[Sign Up]" in text
        assert "Full Name" in text
        assert "Confirm Password" in text
        assert "< Create Account >" in text

    def test_pending_labels(self):
        login = FormState(status=RequestStatus.PENDING)
        signup = FormState(mode=FormMode.SIGNUP, status=RequestStatus.PENDING)

        assert "Logging in..." in render_state(login)
        assert "Signing up..." in render_state(signup)

    def test_messages(self):
        success = FormState(message=ResultMessage.success("User successfully registered!"))
        error = FormState(message=ResultMessage.error("Email taken"))

        assert "✔ User successfully registered!" in render_state(success)
        assert "✖ Email taken" in render_state(error)


class TestParse:
    """Tests for command-line parsing."""

    def test_client_defaults(self):
        args = parse(["client"])

        assert args.command == "client"
        assert args.api_url is None
        assert args.signup is False
        assert args.session_file is None

    def test_client_options(self):
        args = parse(["client", "--api-url", "http://auth.local", "--signup",
                      "--session-file", "/tmp/s.json", "--env", "testing"])

        assert args.api_url == "http://auth.local"
        assert args.signup is True
        assert args.session_file == "/tmp/s.json"
        assert args.env == "testing"

    def test_command_required(self):
        with pytest.raises(SystemExit):
            parse([])


def scripted_input(commands):
    """Replace terminal reads with a fixed list of commands."""
    queue = list(commands)

    async def read(prompt, secret=False):
        if not queue:
            raise EOFError
        return queue.pop(0)

    return read


@pytest.mark.integration
class TestRunForm:
    """Tests for the interactive loop against a local identity service."""

    @pytest.mark.asyncio
    async def test_login_points_at_client_page(self, identity_service, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr(Config, "APP_URL", "")
        monkeypatch.setattr(start_client, "_read", scripted_input([
            "set email jo@example.com",
            "set password pw",
            "submit",
        ]))
        session_file = tmp_path / "session.json"

        signed_in = await run_form(identity_service.base_url, session_file=str(session_file))

        out = capsys.readouterr().out
        assert signed_in
        assert "Signed in. Continue at /profile" in out
        assert identity_service.base_url not in out
        assert json.loads(session_file.read_text(encoding="utf-8")) == {"token": "T1"}

    @pytest.mark.asyncio
    async def test_configured_app_url(self, identity_service, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr(Config, "APP_URL", "https://app.fitai.local")
        monkeypatch.setattr(start_client, "_read", scripted_input([
            "set email jo@example.com",
            "set password pw",
            "submit",
        ]))

        await run_form(identity_service.base_url, session_file=str(tmp_path / "session.json"))

        assert "Continue at https://app.fitai.local/profile" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_leaving_without_signing_in(self, identity_service, tmp_path, monkeypatch):
        monkeypatch.setattr(start_client, "_read", scripted_input(["help", "exit"]))

        assert not await run_form(identity_service.base_url,
                                  session_file=str(tmp_path / "session.json"))
        assert identity_service.requests == []


def test_package_source_has_no_invalid_escapes():
    source = Path(FitAI.__file__).read_text(encoding="utf-8")
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        compile(source, FitAI.__file__, "exec")
