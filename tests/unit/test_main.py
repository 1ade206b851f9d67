import json
from pathlib import Path

import pytest

from app.main import main, parse_args


@pytest.fixture(autouse=True)
def _quiet_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STORAGE_BACKEND", "memory")
    monkeypatch.setenv("CONVERSION_PROVIDER", "disabled")
    monkeypatch.setattr("app.main.Log.configure", lambda level: None)


class TestParseArgs:
    def test_defaults(self) -> None:
        args = parse_args(["file.txt", "--tenant-id", "t1", "--owner-id", "o1"])

        assert args.path == Path("file.txt")
        assert args.owner_type == "knowledgeBaseItem"
        assert args.mime_type is None

    def test_rejects_unknown_owner_type(self) -> None:
        with pytest.raises(SystemExit):
            parse_args(["f", "--tenant-id", "t", "--owner-id", "o", "--owner-type", "invoice"])


class TestMain:
    def test_ingests_text_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = tmp_path / "notes.txt"
        path.write_text("remember the milk", encoding="utf-8")

        code = main([str(path), "--tenant-id", "t1", "--owner-id", "o1", "--owner-type", "example"])

        assert code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["storage_key"].startswith("t1/examples/")
        assert output["storage_key"].endswith("-notes.txt")
        assert output["file_record"]["extracted_text"] == "remember the milk"
        assert output["extraction"] == "produced"
        assert output["thumbnail"] == "skipped"

    def test_disallowed_type_exits_2(self, tmp_path: Path) -> None:
        path = tmp_path / "tool.exe"
        path.write_bytes(b"MZ")

        code = main([str(path), "--tenant-id", "t1", "--owner-id", "o1"])

        assert code == 2

    def test_explicit_mime_type_overrides_guess(self, tmp_path: Path) -> None:
        path = tmp_path / "tool.exe"
        path.write_bytes(b"plain words")

        code = main([str(path), "--tenant-id", "t1", "--owner-id", "o1", "--mime-type", "text/plain"])

        assert code == 0

    def test_storage_failure_exits_1(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        blocker = tmp_path / "root"
        blocker.write_bytes(b"")
        monkeypatch.setenv("STORAGE_BACKEND", "local")
        monkeypatch.setenv("LOCAL_STORAGE_ROOT", str(blocker))
        path = tmp_path / "notes.txt"
        path.write_text("x", encoding="utf-8")

        code = main([str(path), "--tenant-id", "t1", "--owner-id", "o1"])

        assert code == 1
