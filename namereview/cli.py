"""CLI entrypoints for namereview commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from subprocess import CalledProcessError

from .config import ConfigError, load_config, with_overrides
from .git.changes import GitChangeSource
from .git.diff import detect_language
from .llm.schema import manual_suggestion
from .logging import configure_logging
from .models import RenameRequest
from .orchestrator import Orchestrator, ReviewReport
from .rename.orchestrator import RenameOrchestrator


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_review_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the repository root (defaults to current directory).",
    )
    parser.add_argument(
        "--diff-base",
        default="origin/main",
        help="Commit or ref to compare against when computing diffs.",
    )
    parser.add_argument(
        "--title",
        default="",
        help="Change title given to the model (defaults to the latest commit subject).",
    )
    parser.add_argument(
        "--model",
        default=None,
        help="Model to request suggestions from (overrides llm.model and LLM_MODEL).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="as_json",
        help="Print the report as JSON.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="namereview",
        description="Review identifier names in a change and safely apply renames.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    review_parser = subparsers.add_parser(
        "review",
        help="Suggest better names for identifiers added by a change.",
    )
    _add_verbose_option(review_parser, suppress_default=True)
    _add_review_options(review_parser)

    autofix_parser = subparsers.add_parser(
        "autofix",
        help="Review a change and apply the renames that pass the safety gate.",
    )
    _add_verbose_option(autofix_parser, suppress_default=True)
    _add_review_options(autofix_parser)

    rename_parser = subparsers.add_parser(
        "rename",
        help="Rename one symbol in one file with backup and verification.",
    )
    _add_verbose_option(rename_parser, suppress_default=True)
    rename_parser.add_argument("file", help="File containing the symbol.")
    rename_parser.add_argument("old_name", help="Current name of the symbol.")
    rename_parser.add_argument("new_name", help="Name to rename the symbol to.")
    rename_parser.add_argument(
        "--line",
        type=int,
        default=None,
        help="Line of the declaration, used to disambiguate the symbol.",
    )
    rename_parser.add_argument(
        "--root",
        default=".",
        help="Project root used by language tooling (defaults to current directory).",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service exposing suggestions and renames.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for namereview commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    if args.command in {"review", "autofix"}:
        try:
            report = _run_review(args)
        except ConfigError as exc:
            parser.exit(1, f"{exc}\n")
        except (RuntimeError, CalledProcessError) as exc:
            parser.exit(
                1, f"namereview {args.command} failed: {exc}\nRun with --verbose for more details.\n"
            )
        _print_report(report, as_json=bool(args.as_json))
        if any(not outcome.success for outcome in report.renames):
            parser.exit(1)
    elif args.command == "rename":
        _run_rename(parser, args)
    elif args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_review(args: argparse.Namespace) -> ReviewReport:
    repo_path = Path(args.path).expanduser().resolve()
    config = with_overrides(load_config(repo_path), model=args.model)
    source = GitChangeSource(
        repo_path,
        args.diff_base,
        title=args.title,
        exclude_paths=config.exclude_paths,
    )
    source.describe_from_log()
    orchestrator = Orchestrator(config)
    if args.command == "autofix":
        return orchestrator.run_autofix(source, repo_path)
    return orchestrator.run_review(source)


def _run_rename(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    language = detect_language(args.file)
    if language is None:
        parser.exit(1, f"Unsupported file type: {args.file}\n")
    root = Path(args.root).expanduser().resolve()
    try:
        config = load_config(root)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")
    file_path = Path(args.file).expanduser().resolve()
    renamer = RenameOrchestrator(root, tools=config.tools)
    outcome = renamer.rename_file(
        RenameRequest(
            file_path=str(file_path),
            suggestion=manual_suggestion(args.old_name, args.new_name),
            language=language,
            line_number=args.line,
        )
    )
    if not outcome.success:
        parser.exit(1, f"Rename failed: {outcome.error}\n")
    print(
        f"Renamed {outcome.old_name} -> {outcome.new_name} in {_relativize(file_path)} "
        f"({outcome.references_updated} references)"
    )


def _print_report(report: ReviewReport, *, as_json: bool) -> None:
    if as_json:
        print(json.dumps(report.to_dict(), indent=2))
        return
    if not report.items:
        print(f"No naming suggestions ({report.symbols_reviewed} symbols reviewed)")
    for item in report.items:
        marker = "auto" if item.auto_apply else "manual"
        suggestion = item.suggestion
        print(
            f"{item.file}:{item.line_number} [{marker}] {suggestion.old_name} -> "
            f"{suggestion.new_name} ({suggestion.confidence:.0%})"
        )
        print(f"    {suggestion.rationale}")
    for outcome in report.renames:
        status = "renamed" if outcome.success else f"failed: {outcome.error}"
        print(f"{outcome.file}: {outcome.old_name} -> {outcome.new_name} {status}")
    stats = report.stats
    print(
        f"{stats.api_calls} API calls, {stats.total_tokens} tokens, "
        f"${stats.estimated_cost_usd:.4f}, cache hit rate {stats.cache_hit_rate:.0%}"
    )


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
