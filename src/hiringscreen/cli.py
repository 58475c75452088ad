"""Typer CLI entrypoint for the screening pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import pendulum
import typer
import yaml
from pydantic import ValidationError

from . import __version__
from .container import create_container
from .logging import configure_logging
from .pipeline import OutputWriter, SeedLoader, SeedLoadError
from .schemas.config import load_config
from .storage import DuplicateApplicationError, InMemoryStore, NotFoundError

app = typer.Typer(help="Application screening CLI.")


@app.command()
def run(
    data: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Seed JSON with jobs, seekers and applications."),
    output: Path = typer.Option(
        ...,
        exists=False,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
        help="Output JSON path.",
    ),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
    json_logs: bool = typer.Option(True, "--json-logs/--console-logs", help="Render logs as JSON lines or human-readable console output."),
    api_key: Optional[str] = typer.Option(None, envvar="OPENAI_API_KEY", help="Chat provider API key; omit for mock mode."),
    llm_endpoint: Optional[str] = typer.Option(None, help="Chat completion endpoint override."),
) -> None:
    """Submit every seeded application, wait for screening, and write rankings."""
    settings: dict[str, Any] = {}
    if config:
        with config.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle) or {}
        try:
            settings = load_config(loaded).to_settings()
        except ValidationError as exc:
            raise typer.BadParameter(str(exc), param_hint="config") from exc
    if llm_endpoint:
        settings.setdefault("llm", {})["endpoint"] = llm_endpoint

    configure_logging(log_level, json=json_logs)

    container = create_container(settings=settings, api_key=api_key)
    store = container.store()
    service = container.service()
    dispatcher = container.dispatcher()

    try:
        requests = SeedLoader().load(data, store)
    except (SeedLoadError, ValidationError) as exc:
        raise typer.BadParameter(str(exc), param_hint="data") from exc

    errors: list[str] = []
    for request in requests:
        try:
            service.submit_application(
                request["job_id"],
                request["seeker_id"],
                note=request["note"],
            )
        except (DuplicateApplicationError, NotFoundError) as exc:
            errors.append(str(exc))

    dispatcher.wait()
    dispatcher.shutdown()

    payload = {
        "metadata": {
            "application_count": len(requests) - len(errors),
            "errors": errors,
            "mode": "remote" if api_key else "mock",
            "timestamp": pendulum.now().to_iso8601_string(),
            "app_version": __version__,
        },
        "jobs": build_rankings(store),
    }
    OutputWriter().write(output, payload)
    typer.echo(f"Screened {payload['metadata']['application_count']} applications. Results saved to {output}.")


def build_rankings(store: InMemoryStore) -> list[dict[str, Any]]:
    """Employer view: each job with its applications ranked by final score."""
    rankings = []
    for job in store.snapshot()["jobs"]:
        rows = store.list_applications_for_job(job["id"])
        rankings.append(
            {
                "job_id": job["id"],
                "title": job["title"],
                "applications": [
                    {
                        "application": row["application"].model_dump(mode="json", by_alias=True),
                        "seeker_email": row["seeker"].email if row["seeker"] else None,
                        "screening": (
                            row["screening"].model_dump(mode="json", by_alias=True)
                            if row["screening"] is not None
                            else None
                        ),
                    }
                    for row in rows
                ],
            }
        )
    return rankings


def main() -> None:
    app()


if __name__ == "__main__":
    main()
