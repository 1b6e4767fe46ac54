"""Tests for the command line interface and the interactive board shell."""

from __future__ import annotations

import asyncio

import pytest  # type: ignore

from conftest import make_document

from recruiteros import cli
from recruiteros.config import Settings
from recruiteros.pipeline.schema import Stage


JD = "Python engineer"


@pytest.fixture
def shell(fake_provider):
    provider = fake_provider(scores={"Ann.pdf": 91, "Bob.pdf": 40}, filter_result=[], chat_reply="Ann leads.")
    workspace = cli.Workspace(provider, Settings())
    loop = asyncio.new_event_loop()
    loop.run_until_complete(workspace.coordinator.run_batch(JD, [make_document("Ann.pdf"), make_document("Bob.pdf")]))
    board_shell = cli.BoardShell(workspace, loop)
    yield board_shell
    loop.close()


def _id_of(shell, name: str) -> str:
    return next(r.id for r in shell.workspace.store.records() if r.name == name)


def test_board_lists_every_column(shell) -> None:
    output = shell.execute("board")
    assert output.splitlines()[0] == "New Applications (1)"
    assert "Interview (1)" in output
    assert "Offer (0)" in output
    assert "Ann (91%)" in output


def test_move_by_id_prefix(shell) -> None:
    bob = _id_of(shell, "Bob")
    assert shell.execute(f"move {bob[:8]} offer") == "Moved Bob to Offer"
    assert shell.workspace.store.get(bob).stage is Stage.OFFER
    assert shell.execute(f"move {bob} nowhere").startswith("Unknown stage")
    assert shell.execute("move zzz screening") == "No candidate matches id 'zzz'"


def test_select_and_email(shell) -> None:
    ann = _id_of(shell, "Ann")
    assert shell.execute(f"select {ann}").startswith("Ann: fit score 91%")
    assert shell.workspace.coordinator.selected_id == ann
    assert "Ann is a 91% match" in shell.execute(f"email {ann}")


def test_filter_and_clear(shell) -> None:
    shell.workspace.search.provider.filter_result = [_id_of(shell, "Ann")]
    output = shell.execute('filter "python experts"')
    assert output.startswith("Filter active: 1 candidates match")
    assert "Bob" not in output
    assert "Bob" in shell.execute("clear")
    assert shell.workspace.visible_ids is None


def test_ask(shell) -> None:
    assert shell.execute("ask who is strongest?") == "Ann leads."
    assert shell.execute("ask") == "usage: ask TEXT"


def test_unknown_and_quit(shell) -> None:
    assert shell.execute("dance").startswith("Unknown command 'dance'")
    assert shell.execute("") == ""
    assert shell.execute("quit") is None


def test_run_stops_at_quit(shell, capsys) -> None:
    shell.run(["help", "quit", "board"])
    out = capsys.readouterr().out
    assert "Commands:" in out
    assert "New Applications" not in out


def test_export(shell, tmp_path) -> None:
    path = tmp_path / "board.csv"
    assert shell.execute(f"export {path}") == f"Board written to {path}"
    assert path.read_text(encoding="utf-8").startswith("id,name,role,score,stage")


@pytest.fixture
def offline_env(tmp_path, monkeypatch):
    for variable in ("LLM_PROVIDER", "GEMINI_API_KEY", "GOOGLE_API_KEY", "OPENAI_API_KEY"):
        monkeypatch.delenv(variable, raising=False)
    monkeypatch.chdir(tmp_path)
    jd = tmp_path / "jd.txt"
    jd.write_text("Senior Python developer", encoding="utf-8")
    return tmp_path


def test_main_analyze_single_image(offline_env, capsys) -> None:
    resume = offline_env / "jane.png"
    resume.write_bytes(b"\x89PNG")
    out_json = offline_env / "analysis.json"
    out_csv = offline_env / "board.csv"
    cli.main(
        [
            "analyze",
            "--jd", str(offline_env / "jd.txt"),
            "--provider", "placeholder",
            "--json", str(out_json),
            "--csv", str(out_csv),
            str(resume),
        ]
    )
    out = capsys.readouterr().out
    assert "New Applications (1)" in out
    assert "jane: fit score 0%" in out
    assert out_json.exists()
    assert out_csv.exists()


def test_main_analyze_skips_unsupported_files(offline_env, capsys) -> None:
    notes = offline_env / "notes.txt"
    notes.write_text("not a resume", encoding="utf-8")
    cli.main(["analyze", "--jd", str(offline_env / "jd.txt"), "--provider", "placeholder", str(notes)])
    out = capsys.readouterr().out
    assert "New Applications (0)" in out
