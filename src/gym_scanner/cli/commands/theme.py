"""Theme command: view and change the stored accent colours."""

from typing import Annotated, Optional

import typer

from ...core.models import ThemeConfig
from ...io.preferences import load_theme, reset_theme, save_theme
from .. import views
from ..app import DataDirOption, app, get_context


@app.command("theme")
def theme(
    primary: Annotated[
        Optional[str], typer.Option("--primary", help="Primary colour, e.g. #10b981")
    ] = None,
    secondary: Annotated[
        Optional[str], typer.Option("--secondary", help="Secondary colour, e.g. #3b82f6")
    ] = None,
    reset: Annotated[
        bool, typer.Option("--reset", help="Restore the default colours")
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """Show or change the theme colours."""
    ctx = get_context(data_dir)

    if reset:
        current = reset_theme(ctx.store)
        views.print_success("Theme reset to defaults")
    elif primary or secondary:
        current = load_theme(ctx.store)
        try:
            current = ThemeConfig(
                primary=primary or current.primary,
                secondary=secondary or current.secondary,
            )
        except ValueError as e:
            views.print_error(str(e))
            raise typer.Exit(1)
        save_theme(ctx.store, current)
        views.print_success("Theme updated")
    else:
        current = load_theme(ctx.store)

    views.print_theme(current)
