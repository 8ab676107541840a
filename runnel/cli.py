"""Runnel CLI - streaming chat with live code-block rendering."""

import json
import logging
import sys
import threading
from pathlib import Path
from typing import Dict, Optional

import click
from rich.table import Table

from .config import ConfigManager
from .errors import ProviderError
from .providers.base import BaseProvider, ProviderConfig
from .providers.registry import create_provider, discover_providers, get_registry
from .segments import StreamAssembler, compute_plan
from .theme import get_speaker_theme
from .ui import StreamRenderer, render_error, render_notice, render_user_gutter
from .ui.theme import console

_log = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class RunnelApp:
    """Provider and render setup shared by every command."""

    def __init__(self, config: ConfigManager):
        self.config = config
        self.providers: Dict[str, BaseProvider] = {}
        self._init_providers()

    def _init_providers(self) -> None:
        """Initialize enabled providers from the registry."""
        discover_providers()
        registered = get_registry()
        for provider_name in self.config.get_enabled_providers():
            if provider_name not in registered:
                _log.warning("config enables unknown provider %s", provider_name)
                continue
            config = self.config.get_provider_config(provider_name)
            try:
                self.providers[provider_name] = create_provider(provider_name, config)
            except (ProviderError, ValueError, TypeError) as e:
                console.print(f"Failed to initialize {provider_name}: {e}", style="dim red")
        _log.debug("providers ready: %s", ", ".join(self.providers) or "none")

    def get_provider(self, name: Optional[str] = None) -> BaseProvider:
        name = name or self.config.get_default_provider()
        provider = self.providers.get(name)
        if provider is None:
            raise click.ClickException(
                f"Provider '{name}' not available. Enabled: {', '.join(self.providers) or 'none'}"
            )
        return provider

    def assembler(self) -> StreamAssembler:
        return StreamAssembler(
            thresholds=self.config.get_thresholds(),
            languages=self.config.get_languages(),
        )

    def stream_to_console(self, provider: BaseProvider, speaker: str, prompt: str,
                          system: Optional[str] = None) -> str:
        """Stream a reply through the console renderer. Ctrl+C stops it."""
        renderer = StreamRenderer(get_speaker_theme(speaker), console, self.assembler())
        stop = threading.Event()
        try:
            for chunk in provider.stream(prompt, system, stop_event=stop):
                renderer.feed(chunk)
        except KeyboardInterrupt:
            stop.set()
            renderer.finish()
            render_notice("reply stopped")
            return renderer.text
        renderer.finish()
        return renderer.text


def _configure_logging(level: str, log_file: str, tui: bool = False) -> None:
    """Send log records to a file, the Textual devtools console, or stderr.

    Outside the TUI an already configured root logger is left alone.
    """
    handler: logging.Handler
    if log_file:
        handler = logging.FileHandler(Path(log_file).expanduser(), encoding="utf-8")
    elif tui:
        from textual.logging import TextualHandler
        handler = TextualHandler()
    else:
        handler = logging.StreamHandler(sys.stderr)
    logging.basicConfig(
        level=level.upper(), format=LOG_FORMAT, handlers=[handler], force=tui,
    )


def _run_tui(app: RunnelApp, provider: BaseProvider, provider_name: str) -> None:
    from .app import RunnelTUI

    logging_config = app.config.get_logging_config()
    _configure_logging(logging_config["level"], logging_config["file"], tui=True)
    RunnelTUI(provider, provider_name, config=app.config).run()


@click.group()
@click.option("--config", "config_path", type=click.Path(dir_okay=False),
              help="Config file (default ~/.config/runnel/config.yaml)")
@click.option("--log-level", help="Override logging.level from the config")
@click.option("--log-file", help="Override logging.file from the config")
@click.pass_context
def cli(ctx, config_path, log_level, log_file):
    """Runnel - streaming chat with live code rendering."""
    config = ConfigManager(config_path)
    logging_config = config.data.setdefault("logging", {})
    if log_level:
        logging_config["level"] = log_level
    if log_file:
        logging_config["file"] = log_file
    merged = config.get_logging_config()
    _configure_logging(merged["level"], merged["file"])
    ctx.obj = config


def _get_app(ctx) -> RunnelApp:
    return RunnelApp(ctx.obj)


@cli.command()
@click.option("--provider", "-p", help="Provider to use (ollama, replay)")
@click.option("--model", "-m", help="Model to use for this run")
@click.pass_context
def chat(ctx, provider, model):
    """Start interactive chat mode (TUI)."""
    config: ConfigManager = ctx.obj
    name = provider or config.get_default_provider()
    if model:
        config.set_provider_option(name, "model", model)
    app = _get_app(ctx)
    _run_tui(app, app.get_provider(name), name)


@cli.command()
@click.argument("prompt", nargs=-1, required=True)
@click.option("--provider", "-p", help="Provider to use (ollama, replay)")
@click.option("--model", "-m", help="Model to use for this run")
@click.option("--system", "-s", help="System prompt")
@click.pass_context
def ask(ctx, prompt, provider, model, system):
    """Ask a single question and stream the reply."""
    config: ConfigManager = ctx.obj
    name = provider or config.get_default_provider()
    if model:
        config.set_provider_option(name, "model", model)
    app = _get_app(ctx)
    prov = app.get_provider(name)
    text = " ".join(prompt)
    render_user_gutter(text, console)
    try:
        app.stream_to_console(prov, name, text, system or config.get_system_prompt() or None)
    except ProviderError as e:
        render_error(str(e))
        sys.exit(1)
    finally:
        prov.close()


@cli.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--chunk-size", "-c", default=4, show_default=True, help="Characters per chunk")
@click.option("--delay", "-d", default=0.0, show_default=True, help="Seconds between chunks")
@click.option("--tui", is_flag=True, help="Replay inside the fullscreen chat")
@click.pass_context
def replay(ctx, file_path, chunk_size, delay, tui):
    """Stream a saved reply from FILE as if a model were producing it."""
    from .providers.replay import ReplayProvider

    app = _get_app(ctx)
    prov = ReplayProvider(ProviderConfig(
        model="replay",
        options={"path": file_path, "chunk_size": chunk_size, "delay": delay},
    ))
    if tui:
        _run_tui(app, prov, "replay")
        return
    try:
        app.stream_to_console(prov, "replay", "")
    except ProviderError as e:
        render_error(str(e))
        sys.exit(1)


@cli.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print the plan as JSON")
@click.pass_context
def plan(ctx, file_path, as_json):
    """Show how FILE would be split into prose and code segments."""
    config: ConfigManager = ctx.obj
    text = Path(file_path).read_text(encoding="utf-8")
    result = compute_plan(text, config.get_thresholds(), config.get_languages())
    rows = result.to_dicts()

    if as_json:
        click.echo(json.dumps(rows, indent=2))
        return

    table = Table(title=f"{file_path}: {len(rows)} segments")
    table.add_column("#", justify="right", style="dim")
    table.add_column("kind")
    table.add_column("language")
    table.add_column("span", style="dim")
    table.add_column("text")
    for i, row in enumerate(rows):
        language = row.get("language", "")
        if row.get("inline"):
            language += " (inline)"
        preview = row["text"].replace("\n", "⏎")
        if len(preview) > 48:
            preview = preview[:47] + "…"
        table.add_row(str(i), row["kind"], language, f"{row['span'][0]}-{row['span'][1]}", preview)
    console.print(table)


@cli.command()
@click.option("--unload", "unload", metavar="NAME", help="Evict a loaded model from memory")
@click.option("--use", "use", metavar="NAME", help="Make NAME the configured Ollama model")
@click.pass_context
def models(ctx, unload, use):
    """List models installed on the Ollama server."""
    from .providers.ollama import OllamaProvider

    config: ConfigManager = ctx.obj
    if use:
        # reread the file so flag overrides from this run are not persisted
        stored = ConfigManager(str(config.config_path))
        stored.set_provider_option("ollama", "model", use)
        stored.save()
        console.print(f"Default Ollama model set to {use}", style="dim")
        return

    provider_config = config.get_provider_config("ollama") or ProviderConfig(model="")
    prov = OllamaProvider(provider_config)
    try:
        if unload:
            prov.unload_model(unload)
            console.print(f"Unloaded {unload}", style="dim")
            return
        installed = prov.list_models()
        running = set(prov.running_models())
    except ProviderError as e:
        render_error(str(e))
        sys.exit(1)
    finally:
        prov.close()

    if not installed:
        console.print("No models installed.", style="dim")
        return
    for name in installed:
        marker = "  (loaded)" if name in running else ""
        console.print(f"  {name}{marker}")


if __name__ == "__main__":
    cli()
