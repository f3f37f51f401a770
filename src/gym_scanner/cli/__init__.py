"""Terminal host UI built on Typer and Rich."""
