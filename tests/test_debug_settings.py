from ollama_supervisor import debug_settings


def test_source_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("POLL_ATTEMPTS", "3")
    assert debug_settings.get_setting_source("poll_attempts", str(tmp_path / ".env")) == (
        "environment",
        "3",
    )


def test_source_from_env_file(monkeypatch, tmp_path):
    monkeypatch.delenv("MODEL", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("# local overrides\nMODEL=gemma3:12b\n")

    assert debug_settings.get_setting_source("model", str(env_file)) == (".env file", "gemma3:12b")


def test_source_default(monkeypatch, tmp_path):
    monkeypatch.delenv("STATUS_FILE", raising=False)
    source, value = debug_settings.get_setting_source("status_file", str(tmp_path / ".env"))
    assert source == "default"
    assert value == debug_settings.settings.status_file


def test_main_prints_every_category(capsys):
    debug_settings.main()
    out = capsys.readouterr().out
    for heading in ("Server Settings", "Model Settings", "Timing", "Output"):
        assert f"## {heading}" in out
    assert "match_policy" in out
