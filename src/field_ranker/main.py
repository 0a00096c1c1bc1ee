import logging
from enum import Enum
from typing import Annotated

from typer import Argument, Exit, Option, Typer
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import resolve_db_path
from .errors import ConfigurationMissingError
from .executor import RankingExecutor
from .models import RankingJob
from .storage import DuckDBTableStore

app = Typer(help="Rank the records of a table by a numeric field.")


class Direction(str, Enum):
    asc = "asc"
    desc = "desc"


class Method(str, Enum):
    standard = "standard"
    dense = "dense"


class Zero(str, Enum):
    skipZero = "skipZero"
    includeZero = "includeZero"


@app.callback()
def configure(
    verbose: Annotated[
        bool,
        Option("--verbose", "-v", help="Log run progress to stderr."),
    ] = False,
) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def fields(
    table: Annotated[str, Argument(help="Table to describe.")],
    db_path: Annotated[
        str | None,
        Option("--db-path", help="DuckDB file holding the table."),
    ] = None,
) -> None:
    """List a table's fields and whether they can be ranked or written to."""
    console = Console()
    try:
        with DuckDBTableStore(resolve_db_path(db_path), read_only=True) as store:
            table_fields = store.list_fields(table)
    except ConfigurationMissingError as exc:
        console.print(f"[bold red]{escape(str(exc))}[/]")
        raise Exit(code=1) from exc

    output = Table(title=f"Fields of {table}")
    output.add_column("Field")
    output.add_column("Type")
    output.add_column("Source")
    output.add_column("Target")
    for field in table_fields:
        output.add_row(
            field.name,
            field.data_type,
            "yes" if field.can_be_source else "",
            "yes" if field.can_be_target else "",
        )
    console.print(output)


@app.command()
def rank(
    table: Annotated[str, Argument(help="Table whose records are ranked.")],
    source: Annotated[
        str, Option("--source", "-s", help="Numeric field to rank by.")
    ],
    target: Annotated[
        str, Option("--target", "-t", help="Numeric field the rank is written to.")
    ],
    group: Annotated[
        str | None,
        Option("--group", "-g", help="Rank each value of this field separately."),
    ] = None,
    view: Annotated[
        str | None,
        Option("--view", help="Only rank the records visible in this view."),
    ] = None,
    direction: Annotated[
        Direction, Option("--direction", help="asc or desc.")
    ] = Direction.desc,
    method: Annotated[
        Method,
        Option("--method", help="standard (1,2,2,4) or dense (1,2,2,3)."),
    ] = Method.standard,
    zero: Annotated[
        Zero,
        Option("--zero", help="skipZero leaves records valued 0 unranked."),
    ] = Zero.skipZero,
    dry_run: Annotated[
        bool, Option("--dry-run", help="Compute ranks without writing them.")
    ] = False,
    db_path: Annotated[
        str | None,
        Option("--db-path", help="DuckDB file holding the table."),
    ] = None,
) -> None:
    """Compute ranks from the source field and write them to the target field."""
    console = Console()
    job = RankingJob(
        table=table,
        source_field=source,
        target_field=target,
        group_field=group,
        view=view,
        sort_direction=direction.value,
        ranking_method=method.value,
        zero_value_handling=zero.value,
    )

    try:
        with DuckDBTableStore(resolve_db_path(db_path)) as store:
            with console.status(status="Ranking records..."):
                report = RankingExecutor(store).execute(job, dry_run=dry_run)
    except ConfigurationMissingError as exc:
        console.print(
            Panel(
                Markdown(str(exc)),
                title_align="left",
                title="Ranking failed",
                border_style="bold red",
            )
        )
        raise Exit(code=1) from exc

    if report.status == "complete":
        title, style = "Ranking complete", "bold green"
    elif report.status == "partial":
        title, style = "Ranking partially complete", "bold yellow"
    else:
        title, style = "No valid data", "bold yellow"
    console.print(
        Panel(
            Markdown(report.summary()),
            title_align="left",
            title=title,
            border_style=style,
        )
    )
