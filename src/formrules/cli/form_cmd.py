"""Form CLI commands — lint definitions and check records against them."""

from pathlib import Path

import click

from formrules.definitions import (
    load_form_definition,
    load_record,
    validate_definition_file,
)
from formrules.surface import InMemoryForm, ManualScheduler
from formrules.validation import FieldStatus, FormRulesError, register_canned_rules
from formrules.validator import attach

_STATUS_MARK = {
    FieldStatus.VALID: ("✓", "green"),
    FieldStatus.SKIPPED: ("-", None),
    FieldStatus.INVALID: ("✗", "red"),
    FieldStatus.NOT_FOUND: ("?", "yellow"),
}


def _echo_result(result) -> None:
    mark, colour = _STATUS_MARK[result.status]
    line = f"  {mark} {result.field}"
    if result.status == FieldStatus.INVALID:
        line += f" [{result.rule}]: {result.message}"
    elif result.status == FieldStatus.NOT_FOUND:
        line += ": not present in record"
    elif result.status == FieldStatus.SKIPPED:
        line += ": empty, not required"
    click.echo(click.style(line, fg=colour) if colour else line)


@click.command()
@click.argument(
    "definition_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
def lint(definition_path: Path):
    """Check a form definition file against the schema and rule types."""
    issues = validate_definition_file(definition_path)
    errors = [i for i in issues if i.severity == "error"]

    for issue in issues:
        colour = "red" if issue.severity == "error" else "yellow"
        click.echo(click.style(str(issue), fg=colour))

    if errors:
        click.echo(click.style(f"\n{len(errors)} schema error(s) found", fg="red", bold=True))
        raise SystemExit(1)

    # ── Semantic validation: rule types resolve, field rules exist ──────────
    register_canned_rules()
    try:
        definition = load_form_definition(definition_path)
        attach(InMemoryForm(), definition.to_options(), scheduler=ManualScheduler())
    except FormRulesError as e:
        click.echo(click.style(f"Semantic validation failed: {e}", fg="red"), err=True)
        raise SystemExit(1)

    click.echo(f"Loaded {len(definition.rules)} rule(s) and {len(definition.fields)} field(s):")
    for name in sorted(definition.fields):
        rules = definition.fields[name].get("rules") or []
        if isinstance(rules, str):
            rules = [rules]
        click.echo(f"  ✓ {name} ({', '.join(rules) or 'no rules'})")

    click.echo(click.style("\nForm definition is valid.", fg="green", bold=True))


@click.command()
@click.argument(
    "definition_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.argument(
    "record_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option("--field", "field_name", default=None, help="Validate a single field only.")
@click.option(
    "--stop-on-error/--no-stop-on-error",
    default=None,
    help="Override the definition's stopOnError setting.",
)
def check(
    definition_path: Path,
    record_path: Path,
    field_name: str | None,
    stop_on_error: bool | None,
):
    """Validate a record of field values against a form definition."""
    register_canned_rules()
    try:
        definition = load_form_definition(definition_path)
        record = load_record(record_path)
        options = definition.to_options()
        if stop_on_error is not None:
            options["stopOnError"] = stop_on_error

        form = InMemoryForm(record)
        validator = attach(form, options, scheduler=ManualScheduler())

        if field_name:
            results = [validator.validate(field_name)]
            valid = bool(results[0])
        else:
            submission = validator.submit()
            results = submission.results
            valid = submission.valid
    except FormRulesError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(2)

    for result in results:
        _echo_result(result)

    if not valid:
        failed = sum(1 for r in results if not r)
        click.echo(click.style(f"\n{failed} field(s) failed validation", fg="red", bold=True))
        raise SystemExit(1)

    click.echo(click.style("\nRecord is valid.", fg="green", bold=True))
