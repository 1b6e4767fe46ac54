"""
Command line interface for RecruiterOS.

Two subcommands are provided:

* ``analyze`` runs one batch of résumés against a job description,
  prints the resulting board (and the full analysis when a single
  résumé was given) and can export the board to CSV and the analysis
  to JSON.
* ``session`` runs the same batch and then opens an interactive board
  shell where candidates can be moved between stages, inspected,
  filtered with natural language, discussed with the assistant and
  handed off to the hiring manager.

The CLI only wires components together; the work is done by the
`pipeline`, `search`, `assistant` and `report` packages.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import shlex
import sys
from typing import Callable, Dict, Iterable, List, Optional

from tqdm import tqdm

from .assistant.session import ChatSession
from .config import Settings, load_settings
from .ingest.documents import load_documents
from .llm.providers import AIProvider, get_default_provider
from .pipeline.board import BoardTransitionManager
from .pipeline.coordinator import BatchProgress, BatchReport, PipelineCoordinator
from .pipeline.schema import AnalysisResult, CandidateRecord, ChatRole, Stage
from .report.export import save_analysis_json, write_board_csv
from .report.handoff import draft_handoff_email
from .search.semantic_filter import SemanticFilterAdapter

logger = logging.getLogger("recruiteros.cli")


def format_record(record: CandidateRecord) -> str:
    tags = ", ".join(tag.label for tag in record.tags)
    line = f"  [{record.id[:8]}] {record.name} ({record.score}%)"
    return f"{line} - {tags}" if tags else line


def format_board(columns: Dict[Stage, List[CandidateRecord]]) -> str:
    lines: List[str] = []
    for stage, records in columns.items():
        lines.append(f"{stage.value} ({len(records)})")
        lines.extend(format_record(record) for record in records)
        if not records:
            lines.append("  (empty)")
    return "\n".join(lines)


def format_analysis(name: str, analysis: AnalysisResult) -> str:
    lines = [f"{name}: fit score {analysis.fit_score}%"]
    if analysis.score_reasoning:
        lines.append(analysis.score_reasoning)
    sections = [
        ("Top strengths", analysis.top_strengths),
        ("Gaps", analysis.gap_analysis),
        ("Interview questions", analysis.interview_questions),
        ("Layout feedback", analysis.resume_quality.visual_feedback),
    ]
    if analysis.candidate_tags:
        lines.append("Tags: " + ", ".join(f"{t.label} ({t.color})" for t in analysis.candidate_tags))
    lines.append(f"Readability: {analysis.resume_quality.readability_score}/100")
    lines.append(f"Integrity: {analysis.integrity_check.status}")
    lines.extend(f"  ! {issue}" for issue in analysis.integrity_check.issues)
    for title, items in sections:
        if items:
            lines.append(f"{title}:")
            lines.extend(f"  - {item}" for item in items)
    return "\n".join(lines)


def _tqdm_progress() -> Callable[[BatchProgress], None]:
    """Return a progress callback that drives a tqdm bar."""
    bars: Dict[str, tqdm] = {}

    def on_progress(progress: BatchProgress) -> None:
        bar = bars.get("bar")
        if bar is None:
            bar = bars["bar"] = tqdm(total=progress.total, unit="resume", file=sys.stderr)
        bar.set_description(progress.label or "Done")
        bar.update(progress.completed - bar.n)
        if not progress.running:
            bar.close()
            bars.pop("bar", None)

    return on_progress


class Workspace:
    """The components of one recruiting session, wired to a single provider."""

    def __init__(self, provider: AIProvider, settings: Optional[Settings] = None) -> None:
        settings = settings or Settings()
        self.settings = settings
        self.coordinator = PipelineCoordinator(provider, blind_mode=settings.blind_mode)
        self.store = self.coordinator.store
        self.board = BoardTransitionManager(self.store)
        self.search = SemanticFilterAdapter(provider)
        self.chat = ChatSession(provider, max_context_records=settings.context_max_records)
        self.visible_ids: Optional[List[str]] = None
        self.job_description = ""

    def find(self, prefix: str) -> Optional[CandidateRecord]:
        """Look up a record by id or unique id prefix."""
        matches = [record for record in self.store.records() if record.id.startswith(prefix)]
        return matches[0] if len(matches) == 1 else None


class BoardShell:
    """Interactive board commands.

    Each command returns the text to print.  Long-running operations
    (filtering, chatting, re-analysis) run to completion on the shell's
    event loop before the next command is read.
    """

    prompt = "recruiteros> "

    def __init__(self, workspace: Workspace, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self.workspace = workspace
        self.loop = loop or asyncio.new_event_loop()
        self.commands: Dict[str, Callable[[List[str]], str]] = {
            "board": self.do_board,
            "move": self.do_move,
            "select": self.do_select,
            "filter": self.do_filter,
            "clear": self.do_clear,
            "ask": self.do_ask,
            "email": self.do_email,
            "blind": self.do_blind,
            "export": self.do_export,
            "help": self.do_help,
        }

    def _run(self, coro):
        return self.loop.run_until_complete(coro)

    def do_help(self, args: List[str]) -> str:
        return (
            "Commands:\n"
            "  board                 show the board\n"
            "  move ID STAGE         move a candidate (stages: new applications, screening, interview, offer)\n"
            "  select ID             show a candidate's full analysis\n"
            "  filter TEXT           show only candidates matching TEXT\n"
            "  clear                 remove the filter\n"
            "  ask TEXT              ask the assistant about the pipeline\n"
            "  email ID              draft a hand-off email for a candidate\n"
            "  blind on|off          toggle blind hiring and re-analyze the displayed result\n"
            "  export PATH           write the board to CSV\n"
            "  quit                  leave the session"
        )

    def do_board(self, args: List[str]) -> str:
        board = format_board(self.workspace.board.columns(self.workspace.visible_ids))
        if self.workspace.visible_ids is not None:
            board = f"Filter active: {len(self.workspace.visible_ids)} candidates match\n{board}"
        return board

    def do_move(self, args: List[str]) -> str:
        if len(args) < 2:
            return "usage: move ID STAGE"
        record = self.workspace.find(args[0])
        if record is None:
            return f"No candidate matches id '{args[0]}'"
        try:
            stage = Stage.parse(" ".join(args[1:]))
        except ValueError as exc:
            return str(exc)
        self.workspace.board.move(record.id, stage)
        return f"Moved {record.name} to {stage.value}"

    def do_select(self, args: List[str]) -> str:
        if not args:
            return "usage: select ID"
        record = self.workspace.find(args[0])
        if record is None:
            return f"No candidate matches id '{args[0]}'"
        analysis = self.workspace.coordinator.select(record.id)
        return format_analysis(record.name, analysis)

    def do_filter(self, args: List[str]) -> str:
        query = " ".join(args)
        ids = self._run(self.workspace.search.filter(query, self.workspace.store.records()))
        self.workspace.visible_ids = ids
        return self.do_board([])

    def do_clear(self, args: List[str]) -> str:
        self.workspace.visible_ids = None
        self.workspace.coordinator.clear_selection()
        return self.do_board([])

    def do_ask(self, args: List[str]) -> str:
        chat = self.workspace.chat
        accepted = self._run(chat.send(" ".join(args), self.workspace.store.records()))
        if not accepted:
            return "usage: ask TEXT"
        last = chat.transcript[-1]
        return last.text if last.role == ChatRole.ASSISTANT else ""

    def do_email(self, args: List[str]) -> str:
        if not args:
            return "usage: email ID"
        record = self.workspace.find(args[0])
        if record is None:
            return f"No candidate matches id '{args[0]}'"
        return draft_handoff_email(record.analysis, record.name)

    def do_blind(self, args: List[str]) -> str:
        if not args or args[0].lower() not in ("on", "off"):
            return f"Blind hiring is {'on' if self.workspace.coordinator.blind_mode else 'off'}"
        enabled = args[0].lower() == "on"
        result = self._run(self.workspace.coordinator.set_blind_mode(enabled))
        message = f"Blind hiring {'on' if enabled else 'off'}"
        if result is not None:
            message += "\n" + format_analysis("Re-analysis", result)
        return message

    def do_export(self, args: List[str]) -> str:
        if not args:
            return "usage: export PATH"
        write_board_csv(self.workspace.store.records(), args[0])
        return f"Board written to {args[0]}"

    def execute(self, line: str) -> Optional[str]:
        """Run one command line; returns ``None`` when the shell should exit."""
        try:
            parts = shlex.split(line)
        except ValueError as exc:
            return str(exc)
        if not parts:
            return ""
        name, args = parts[0].lower(), parts[1:]
        if name in ("quit", "exit"):
            return None
        handler = self.commands.get(name)
        if handler is None:
            return f"Unknown command '{name}'. Type 'help' for a list of commands."
        return handler(args)

    def run(self, lines: Optional[Iterable[str]] = None) -> None:
        source = iter(lines) if lines is not None else None
        while True:
            try:
                line = next(source) if source is not None else input(self.prompt)
            except (EOFError, StopIteration):
                break
            output = self.execute(line)
            if output is None:
                break
            if output:
                print(output)


def _read_job_description(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _build_workspace(args: argparse.Namespace) -> Workspace:
    settings = load_settings(args.config)
    if not args.verbose:
        logging.getLogger().setLevel(settings.log_level.upper())
    if args.provider:
        settings.provider = args.provider
    if args.blind:
        settings.blind_mode = True
    return Workspace(get_default_provider(settings), settings)


def _run_batch(workspace: Workspace, loop: asyncio.AbstractEventLoop, args: argparse.Namespace) -> BatchReport:
    workspace.job_description = _read_job_description(args.jd)
    documents = load_documents(args.resumes)
    if not documents:
        logger.warning("No usable résumé files given")
    workspace.coordinator.on_progress = _tqdm_progress()
    report = loop.run_until_complete(workspace.coordinator.run_batch(workspace.job_description, documents))
    for name, error in report.failures:
        logger.error("Could not analyse %s: %s", name, error)
    return report


def cmd_analyze(args: argparse.Namespace) -> None:
    """Analyse résumés once and print the board."""
    workspace = _build_workspace(args)
    loop = asyncio.new_event_loop()
    try:
        _run_batch(workspace, loop, args)
    finally:
        loop.close()
    print(format_board(workspace.board.columns()))
    current = workspace.coordinator.current_result
    if current is not None:
        print()
        print(format_analysis(workspace.store.records()[0].name, current))
        if args.json:
            save_analysis_json(current, args.json)
            logger.info("Analysis saved to %s", args.json)
    if args.csv:
        write_board_csv(workspace.store.records(), args.csv)
        logger.info("Board written to %s", args.csv)


def cmd_session(args: argparse.Namespace) -> None:
    """Analyse résumés, then open the interactive board shell."""
    workspace = _build_workspace(args)
    loop = asyncio.new_event_loop()
    try:
        _run_batch(workspace, loop, args)
        shell = BoardShell(workspace, loop)
        print(shell.do_board([]))
        print(shell.do_help([]))
        shell.run()
    finally:
        loop.close()


def _add_batch_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--jd", required=True, help="Path to a text file with the job description")
    parser.add_argument("resumes", nargs="+", help="Résumé files (PDF or image)")
    parser.add_argument("--blind", action="store_true", help="Enable blind hiring mode")
    parser.add_argument("--provider", choices=["gemini", "openai", "placeholder"], help="Override LLM_PROVIDER")
    parser.add_argument("--config", help="YAML config file")


def main(argv: List[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="recruiteros", description="RecruiterOS candidate pipeline")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_cmd = subparsers.add_parser("analyze", help="Analyse résumés and print the board")
    _add_batch_arguments(analyze_cmd)
    analyze_cmd.add_argument("--csv", help="Write the board to this CSV file")
    analyze_cmd.add_argument("--json", help="Write a single résumé's analysis to this JSON file")
    analyze_cmd.set_defaults(func=cmd_analyze)

    session_cmd = subparsers.add_parser("session", help="Analyse résumés and open the interactive board")
    _add_batch_arguments(session_cmd)
    session_cmd.set_defaults(func=cmd_session)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )
    args.func(args)


if __name__ == "__main__":
    main()
