"""Renders lint reports as text, JSON, GitHub Actions workflow commands or a Markdown summary."""

from pathlib import Path

import structlog

from workflow_conventions.configuration.models import OutputFormat
from workflow_conventions.reporting.templates import TEMPLATES_DIRECTORY, construct_jinja2_template_from_file, render_template
from workflow_conventions.schemas.findings import Finding, LintReport, Severity

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

_GITHUB_COMMANDS = {
    Severity.ERROR: "error",
    Severity.WARNING: "warning",
    Severity.INFO: "notice",
}


def escape_command_data(value: str) -> str:
    """Escape the message part of a workflow command."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_command_property(value: str) -> str:
    """Escape a property value of a workflow command."""
    return escape_command_data(value).replace(":", "%3A").replace(",", "%2C")


def format_finding_text(finding: Finding) -> str:
    """Format one finding as `path:line: SEVERITY RULE message`."""
    line = f"{finding.path}:{finding.line}: {finding.severity.value.upper()} {finding.rule_id} {finding.message}"
    if finding.hint:
        line += f"\n    hint: {finding.hint}"
    return line


def format_text(report: LintReport) -> str:
    """Render a report as human-readable text."""
    lines = [format_finding_text(finding) for finding in report.sorted_findings()]
    lines.append(
        f"{report.files_checked} file(s) checked: "
        f"{report.error_count} error(s), {report.warning_count} warning(s), {report.info_count} info"
    )
    return "\n".join(lines)


def format_json(report: LintReport) -> str:
    """Render a report as JSON."""
    return report.model_copy(update={"findings": report.sorted_findings()}).model_dump_json(indent=2)


def format_github(report: LintReport) -> str:
    """Render a report as GitHub Actions workflow commands, one annotation per finding."""
    lines: list[str] = []
    for finding in report.sorted_findings():
        properties = ",".join(
            [
                f"file={escape_command_property(finding.path)}",
                f"line={finding.line}",
                f"title={escape_command_property(finding.rule_id)}",
            ]
        )
        message = finding.message if not finding.hint else f"{finding.message}\n{finding.hint}"
        lines.append(f"::{_GITHUB_COMMANDS[finding.severity]} {properties}::{escape_command_data(message)}")
    return "\n".join(lines)


def format_markdown(report: LintReport) -> str:
    """Render a report as a Markdown summary suitable for a job step summary."""
    template = construct_jinja2_template_from_file(TEMPLATES_DIRECTORY / "step_summary.md.j2")
    return render_template(
        template,
        {
            "findings": [finding.model_dump(mode="json") for finding in report.sorted_findings()],
            "error_count": report.error_count,
            "warning_count": report.warning_count,
            "info_count": report.info_count,
            "files_checked": report.files_checked,
            "blocks_checked": report.blocks_checked,
        },
    )


def format_report(report: LintReport, output_format: OutputFormat) -> str:
    """Render a report in the requested format."""
    if output_format == OutputFormat.JSON:
        return format_json(report)
    if output_format == OutputFormat.GITHUB:
        return format_github(report)
    if output_format == OutputFormat.MARKDOWN:
        return format_markdown(report)
    return format_text(report)


def write_step_summary(report: LintReport, summary_file: Path) -> None:
    """Append the Markdown summary of a report to a step summary file."""
    with open(summary_file, "a", encoding="utf-8") as f:
        f.write(format_markdown(report))
    logger.info("Wrote step summary", summary_file=str(summary_file))
