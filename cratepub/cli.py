from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Optional

import typer
from rich.console import Console
from rich.markup import escape

from .config import Config
from .envvalidate import ToolValidator
from .errors import DryRunError, PublishFailedError, PublisherError
from .publisher import Publisher
from .tools import CargoToolRunner, ToolRunner


LOG_LEVEL_ENV = "CRATEPUB_LOG_LEVEL"

app = typer.Typer(name="cratepub", help="Publish one crate of a Cargo workspace.")
console = Console()


def _configure_logging(verbose: bool) -> None:
    log_level = os.getenv(LOG_LEVEL_ENV, "INFO" if verbose else "WARNING")
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(name)s: %(message)s",
    )


def _load_config(config_path: Optional[Path]) -> Config:
    if config_path:
        return Config(config_path=config_path, enable_hierarchy=True)
    return Config.load_with_workspace_context()


def build_tool_runner(config: Config, verbose: bool = False) -> ToolRunner:
    return CargoToolRunner({"cargo": config.cargo, "publish_args": config.publish_args, "show": verbose})


def _say(out: Console, text: str = "") -> None:
    out.print(text, soft_wrap=True, emoji=False)


def _report(error: PublisherError, out: Console, streamed: bool = False) -> None:
    _say(out, f"❌ {escape(error.message)}")
    tool_failure = isinstance(error, (DryRunError, PublishFailedError))
    if tool_failure and not streamed:
        _say(out, "   👉 Error output:")
    if error.output and not (tool_failure and streamed):
        # Tool output is shown as-is, never parsed as markup
        out.out(error.output, highlight=False)


def cmd_publish(
    config_path: Optional[Path] = None,
    verbose: bool = False,
    tools: Optional[ToolRunner] = None,
    prompt: Optional[Callable[[str], str]] = None,
    out: Optional[Console] = None,
) -> int:
    out = out or console
    streamed = False
    try:
        config = _load_config(config_path)
        validators = [ToolValidator([{"name": config.cargo}])] if tools is None and config.check_tools else []
        streamed = tools is None and verbose
        publisher = Publisher(
            tools or build_tool_runner(config, verbose=verbose),
            console=out,
            prompt=prompt,
            change_process_cwd=config.change_process_cwd,
            validators=validators,
        )
        _say(out, "📦 Rust workspace crate publisher")
        _say(out)
        publisher.run()
        return 0
    except PublisherError as e:
        _report(e, out, streamed=streamed)
        return e.exit_code
    except Exception as e:  # noqa: BLE001
        _say(out, f"Unexpected error: {escape(str(e))}")
        return 1


@app.command(help="List local crates, ask which one to publish, dry-run it, then publish it.")
def publish_command(
    config_path: Optional[Path] = typer.Option(None, "--config", help="Path to a .cratepub.yaml (default: workspace, then ~/.cratepub.yaml)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
):
    _configure_logging(verbose)
    code = cmd_publish(config_path=config_path, verbose=verbose)
    raise typer.Exit(code)


def main(argv: list[str] | None = None) -> int:
    # Programmatic entry point that returns an int code.
    try:
        # With standalone_mode=False click hands back the typer.Exit code
        rv = app(args=argv, prog_name="cratepub", standalone_mode=False)
        return int(rv or 0)
    except typer.Exit as e:
        return int(e.exit_code or 0)
    except SystemExit as e:
        return int(e.code or 0)
    except Exception as e:  # noqa: BLE001
        if str(e):
            typer.echo(f"Unexpected error: {e}", err=True)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
