"""create-project command."""

from __future__ import annotations

from pathlib import Path

import click

from idfcli.chain import SharedOptions
from idfcli.env import setup_idf_environment
from idfcli.errors import ProjectError
from idfcli.templates import render_project_files


def create_project(opts: SharedOptions, name: str, path: Path | str | None = None) -> Path:
    """Scaffold a new project directory. Returns its path."""
    setup_idf_environment()

    project_path = Path(path) / name if path else Path(name)
    if project_path.exists():
        raise ProjectError(f"Directory {project_path} already exists")

    click.echo(f"Creating project '{name}' at: {project_path}")

    for rel_path, content in render_project_files(name).items():
        target = project_path / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)

    click.echo(f"Project '{name}' created successfully!")
    click.echo("To get started:")
    click.echo(f"  cd {project_path}")
    click.echo("  idfcli set-target esp32")
    click.echo("  idfcli build")
    return project_path
