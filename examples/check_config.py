import asyncio
from pathlib import Path

from rich.console import Console

from shortest import ShortestError, create_provider, load_config, load_config_file

console = Console()


async def main():
    raw = load_config_file(Path(__file__).parent / "shortest_config.py")

    try:
        config = load_config(raw, cli_options={"headless": True})
        llm = create_provider(config.ai)
    except ShortestError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    console.print(f"[bold green]Testing {config.base_url} with {llm!r}[/bold green]")

    result = await llm.get_completion([
        {"role": "system", "content": "You are a browser testing assistant."},
        {"role": "user", "content": "Reply with OK if you can read this."},
    ])
    console.print(f"[bold green]Result:[/bold green] {result}")


if __name__ == "__main__":
    asyncio.run(main())
