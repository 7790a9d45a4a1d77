import json

from ollama_supervisor.params import Status
from ollama_supervisor.status import write_status_file


def make_status(running=True, available=True):
    return Status(
        ollama_running=running,
        gemma_available=available,
        api_url="http://127.0.0.1:11434",
        model="gemma3:4b",
    )


def test_write_and_read_status(tmp_path):
    path = tmp_path / "ollama-status.json"

    assert write_status_file(make_status(), path) is True
    data = json.loads(path.read_text())
    assert data["ready"] is True
    assert data["apiUrl"] == "http://127.0.0.1:11434"

    assert Status.model_validate_json(path.read_text()).model == "gemma3:4b"


def test_status_file_is_overwritten(tmp_path):
    path = tmp_path / "ollama-status.json"
    write_status_file(make_status(), path)
    write_status_file(make_status(running=False, available=False), path)

    data = json.loads(path.read_text())
    assert data["ollamaRunning"] is False
    assert data["ready"] is False


def test_write_failure_is_reported_not_raised(tmp_path):
    assert write_status_file(make_status(), tmp_path) is False
