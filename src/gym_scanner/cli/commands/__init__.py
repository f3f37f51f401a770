"""Typer sub-commands; importing a module registers its commands on the shared app."""
