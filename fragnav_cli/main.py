# fragnav_cli/main.py

import asyncio
from pathlib import Path
from typing import List, Optional

import typer
import yaml

from fragnav import (
    Config,
    ContentFetcher,
    InMemorySurface,
    Navigator,
    configure_logging,
    parse_fragments,
)
from fragnav.config import DEFAULT_SERVER_PORT
from fragnav.server import FragmentServer

app = typer.Typer(
    name="fragnav",
    help="Load, inspect and replay view-fragment navigation.",
    add_completion=False,
)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level (defaults to config.yaml)."),
):
    configure_logging(log_level)


# --- fetch ---

@app.command()
def fetch(
    address: str = typer.Argument(..., help="Fragment address, absolute or relative to --base-url."),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Prefix for relative addresses."),
):
    """
    Fetches a fragment and lists the scripts embedded in it.
    """
    content = asyncio.run(_fetch(address, base_url))
    if content is None:
        print(f"❌ Error: could not fetch '{address}'")
        raise typer.Exit(code=1)

    fragments = parse_fragments(content)
    print(f"✅ {address}: {len(content)} characters, {len(fragments)} embedded fragment(s)")
    for fragment in fragments:
        if fragment.is_external:
            kind, detail = "external", fragment.src
        elif fragment.is_inline:
            kind, detail = "inline", f"{len(fragment.code.strip())} chars"
        else:
            kind, detail = "empty", ""
        if not fragment.is_executable:
            kind += " (data)"
        print(f"  #{fragment.index} {kind:<16} {detail}")


async def _fetch(address: str, base_url: Optional[str]):
    async with ContentFetcher(base_url=base_url) as fetcher:
        return await fetcher.fetch(address)


# --- replay ---

def load_script(path: Path) -> dict:
    """Reads and checks a YAML navigation script."""
    with path.open("r", encoding="utf-8") as fh:
        script = yaml.safe_load(fh) or {}
    if not isinstance(script, dict):
        raise ValueError("script must be a mapping with 'containers' and 'steps'")
    steps = script.get("steps") or []
    if not isinstance(steps, list):
        raise ValueError("'steps' must be a list")
    for number, step in enumerate(steps, start=1):
        if step == "back" or (isinstance(step, dict) and "back" in step):
            continue
        forward = step.get("forward") if isinstance(step, dict) else None
        if not isinstance(forward, dict) or "address" not in forward or "container" not in forward:
            raise ValueError(f"step {number}: expected 'back' or 'forward: {{address, container}}'")
    return script


async def run_script(script: dict, base_url: Optional[str], wait_ms: Optional[int]) -> List[str]:
    """Plays the script on a headless surface; returns one report line per step."""
    lines = []
    async with ContentFetcher(base_url=base_url) as fetcher:
        surface = InMemorySurface(script.get("containers") or [], fetcher=fetcher)
        navigator = Navigator(surface, fetcher)
        for number, step in enumerate(script.get("steps") or [], start=1):
            if step == "back" or (isinstance(step, dict) and "back" in step):
                ok = await navigator.go_back()
                outcome = f"back -> {'ok' if ok else 'nothing to go back to'}"
            else:
                forward = step["forward"]
                result = await navigator.navigate_forward(
                    forward["address"],
                    forward["container"],
                    wait_ms=forward.get("wait_ms", wait_ms),
                    style_rules=forward.get("style_rules"),
                    callbacks=forward.get("callbacks"),
                    force_reload=bool(forward.get("reload", False)),
                )
                outcome = f"forward {forward['address']} -> {forward['container']}: {result.status.value}"
                if result.reason:
                    outcome += f" ({result.reason})"
            lines.append(f"[{number}] {outcome} | registry: [{', '.join(navigator.registry)}]")
    return lines


@app.command()
def replay(
    script_path: Path = typer.Argument(..., help="YAML navigation script."),
    fragments: Optional[Path] = typer.Option(None, "--fragments", help="Serve this directory as the content store."),
    wait_ms: Optional[int] = typer.Option(None, "--wait-ms", help="Settle delay per load (defaults to config)."),
):
    """
    Replays a navigation script headlessly and prints the history after each step.
    """
    try:
        script = load_script(script_path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"❌ Error: invalid script '{script_path}': {e}")
        raise typer.Exit(code=1)

    server = None
    base_url = script.get("base_url")
    if fragments is not None:
        if not fragments.is_dir():
            print(f"❌ Error: fragment directory not found at '{fragments}'")
            raise typer.Exit(code=1)
        server = FragmentServer(fragments).start()
        base_url = server.base_url

    try:
        for line in asyncio.run(run_script(script, base_url, wait_ms)):
            print(line)
    finally:
        if server is not None:
            server.stop()


# --- run ---

@app.command()
def run(
    directory: Path = typer.Argument(..., help="Directory of fragment files to serve."),
    start: str = typer.Option(..., "--start", help="Address of the first view."),
    container: str = typer.Option(..., "--container", help="Container the first view loads into."),
    containers: Optional[str] = typer.Option(None, "--containers", help="Comma separated container ids of the host page."),
    port: Optional[int] = typer.Option(None, "--port", help="Fragment server port."),
):
    """
    Opens the desktop shell on a directory of fragments.
    """
    if not directory.is_dir():
        print(f"❌ Error: fragment directory not found at '{directory}'")
        raise typer.Exit(code=1)

    from fragnav.window.webview import run_shell

    config = Config()
    ids = [c.strip() for c in containers.split(",")] if containers else list(config.get("containers") or [])
    if container not in ids:
        ids.append(container)

    server = FragmentServer(directory, port=port if port is not None else config.get_nested("server.port", DEFAULT_SERVER_PORT))
    server.start()
    try:
        code = run_shell(
            server.base_url,
            start,
            container,
            ids,
            title=config.get_nested("window.title", "fragnav"),
            width=config.get_nested("window.width", 1000),
            height=config.get_nested("window.height", 700),
        )
    finally:
        server.stop()
    print("👋 Shell has exited.")
    raise typer.Exit(code=code)


if __name__ == "__main__":
    app()
