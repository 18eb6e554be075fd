import json
import logging
import typing as t

import pydantic as p

import labelgrade.lib.cli as click
import labelgrade.lib.json as lgjson
from labelgrade.grading import evaluate_response, export_tasks, GradingError, Severity, validate_tasks
from labelgrade.model import FormResponse

logger = logging.getLogger(__name__)

SeverityColors = {
    Severity.Critical: "magenta",
    Severity.Error: "red",
    Severity.Warning: "yellow",
    Severity.Info: "cyan",
}


def _load_json(fp: t.IO[str]) -> t.Any:
    try:
        return json.loads(fp.read())
    except ValueError as e:
        # JSONDecodeError, or an integer past the interpreter's digit limit
        raise click.ClickException(f"{fp.name}: invalid JSON: {e}") from e


@click.group()
def grade(): ...


@grade.command()
@click.argument("graders_file", type=click.File("r"))
@click.argument("response_file", type=click.File("r"), default="-")
@click.option("--form", is_flag=True, default=False, help="treat the response as a JSON object of form values")
def evaluate(graders_file: t.IO[str], response_file: t.IO[str], form: bool):
    """Grade a response against a list of graders.

    GRADERS_FILE holds a JSON list of grader configurations, or a task object
    with a `graders` key. The response is read from RESPONSE_FILE, or stdin.
    """
    graders = _load_json(graders_file)
    if isinstance(graders, dict) and "graders" in graders:
        graders = t.cast(dict[str, t.Any], graders)["graders"]

    response: str | FormResponse
    if form:
        try:
            response = FormResponse(values=_load_json(response_file))
        except p.ValidationError as e:
            raise click.ClickException(f"{response_file.name}: form values must be a flat object") from e
    else:
        response = response_file.read()

    try:
        result = evaluate_response(response, graders)
    except GradingError as e:
        raise click.ClickException(str(e)) from e
    click.echo(lgjson.dumps(result, indent=2))


@grade.command()
@click.argument("bundle", type=click.File("r"))
@click.option("-o", "--output", type=click.File("w"), default="-", help="where to write the exported bundle")
def export(bundle: t.IO[str], output: t.IO[str]):
    """Strip expected answers from every grader in a task bundle."""
    data = _load_json(bundle)
    if not isinstance(data, dict):
        raise click.ClickException(f"{bundle.name}: bundle must be an object with a `tasks` list")
    try:
        exported = export_tasks(t.cast(dict[str, t.Any], data))
    except GradingError as e:
        raise click.ClickException(str(e)) from e
    click.echo(lgjson.dumps(exported, indent=2), file=output)


@grade.command()
@click.argument("bundle", type=click.File("r"))
@click.option("--strict", is_flag=True, default=False, help="treat warnings as errors")
@click.pass_context
def validate(ctx: click.Context, bundle: t.IO[str], strict: bool):
    """Check a task bundle for grader configuration problems before import."""
    report = validate_tasks(_load_json(bundle), strict=strict)
    for issue in report.issues:
        tag = click.style(f"{issue.severity.value:<8}", fg=SeverityColors[issue.severity])
        click.echo(f"{tag} {issue.path}: {issue.message}")

    summary = (
        f"{report.task_count} tasks, {report.grader_count} graders: "
        f"{report.critical_count} critical, {report.error_count} errors, {report.warning_count} warnings"
    )
    if report.is_valid:
        click.echo(click.style("VALID ", fg="green") + summary)
        return
    click.echo(click.style("INVALID ", fg="red") + summary)
    logger.debug("bundle failed validation", extra={"bundle": bundle.name, "strict": strict})
    ctx.exit(1)
