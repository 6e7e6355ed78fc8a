from __future__ import annotations

import typer

from .commands import prototypes_cmd, settings_cmd
from .logging_ import setup_logging


def _build_app() -> typer.Typer:
    app = typer.Typer(
        name="protopedia",
        help="ProtoPedia API v2 CLI",
        no_args_is_help=True,
    )

    app.command("list")(prototypes_cmd.list_prototypes)
    app.command("tsv")(prototypes_cmd.download_tsv)
    app.add_typer(settings_cmd.app, name="settings")

    @app.callback()
    def _main(
            ctx: typer.Context,
            verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logs, including HTTP traffic."),
    ):
        setup_logging(verbose)
        ctx.obj = {"verbose": verbose}

    return app


app = _build_app()
