"""Main Typer application with 2 subcommands."""

from __future__ import annotations

import typer

app = typer.Typer(
    name="grammar-miner",
    help="Mine grammatical patterns from example sentences and rank a corpus against them.",
    no_args_is_help=True,
)


@app.command()
def mine(
    config: str = typer.Option(..., "--config", "-c", help="Path to config YAML"),
    output_dir: str = typer.Option(
        None, "--output-dir", "-o", help="Override output directory"
    ),
) -> None:
    """Mine the patterns shared by the examples and write them as JSON."""
    from .mine_cmd import run_mine

    run_mine(config, output_dir)


@app.command()
def rank(
    config: str = typer.Option(..., "--config", "-c", help="Path to config YAML"),
    output_dir: str = typer.Option(
        None, "--output-dir", "-o", help="Override output directory"
    ),
) -> None:
    """Rank corpus sentences as good matches and coherent wrong answers."""
    from .rank_cmd import run_rank

    run_rank(config, output_dir)


if __name__ == "__main__":
    app()
