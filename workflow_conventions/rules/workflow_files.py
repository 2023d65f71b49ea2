"""Rules for workflow files under the repository's workflow directory."""

from pathlib import Path
from typing import Iterator

from workflow_conventions.configuration.models import LinterConfig
from workflow_conventions.parsing.models import WorkflowFile
from workflow_conventions.parsing.workflows import (
    commented_script_paths,
    concurrency_settings,
    declares_permissions,
    find_key_line,
    find_script_invocations,
    grants_write,
    split_comment,
    workflow_triggers,
)
from workflow_conventions.rules.registry import RuleTarget, Violation, register_rule
from workflow_conventions.schemas.findings import Severity
from workflow_conventions.utils.constants import (
    ADD_MASK_COMMAND,
    DIVERTED_OUTPUT_PATTERN,
    ISSUE_EVENT_TRIGGERS,
    PRINT_COMMAND_PATTERN,
    SECRET_EXPRESSION_PATTERN,
)


@register_rule(
    "WFC001",
    "Scripts invoked by a workflow are referenced in a comment",
    Severity.ERROR,
    RuleTarget.WORKFLOW_FILE,
)
def check_invoked_scripts_commented(workflow: WorkflowFile, config: LinterConfig) -> Iterator[Violation]:
    """Every script a step invokes is named in a comment in the workflow file."""
    commented = commented_script_paths(workflow.text, config.script_extensions)
    for invocation in find_script_invocations(workflow.data, workflow.text, config.script_extensions):
        if invocation.path in commented:
            continue
        yield Violation(
            line=invocation.line,
            message=f"Job '{invocation.job_id}' invokes {invocation.path} without a comment referencing it",
            hint=f"Add a comment such as '# Logic lives in {invocation.path}' above the step",
        )


@register_rule(
    "WFC002",
    "Scripts invoked by a workflow exist in the repository",
    Severity.ERROR,
    RuleTarget.WORKFLOW_FILE,
)
def check_invoked_scripts_exist(workflow: WorkflowFile, config: LinterConfig) -> Iterator[Violation]:
    """Every repository-relative script path a step invokes exists."""
    if workflow.root is None:
        return
    root = Path(workflow.root)
    for invocation in find_script_invocations(workflow.data, workflow.text, config.script_extensions):
        # Bare file names resolve against the step's working directory, which is unknown here.
        if "/" not in invocation.path or invocation.path.startswith("../"):
            continue
        if not (root / invocation.path).is_file():
            yield Violation(
                line=invocation.line,
                message=f"Job '{invocation.job_id}' invokes {invocation.path}, which does not exist",
            )


@register_rule(
    "WFC003",
    "Workflow steps never print secrets",
    Severity.ERROR,
    RuleTarget.WORKFLOW_FILE,
)
def check_secrets_not_printed(workflow: WorkflowFile, config: LinterConfig) -> Iterator[Violation]:
    """No line writes a secrets expression to the job log."""
    for number, line in enumerate(workflow.text.splitlines(), start=1):
        content, _ = split_comment(line)
        secret = SECRET_EXPRESSION_PATTERN.search(content)
        if secret is None or PRINT_COMMAND_PATTERN.search(content) is None or ADD_MASK_COMMAND in content:
            continue
        # Piped or redirected output (e.g., >> "$GITHUB_ENV") does not reach the log.
        if DIVERTED_OUTPUT_PATTERN.search(content, secret.end()):
            continue
        yield Violation(
            line=number,
            message=f"Step prints {secret.group(0)} to the job log",
            hint="Pass secrets through `env:` and never echo them",
        )


@register_rule(
    "WFC004",
    "Issue and pull request workflows that write use a non-cancelling concurrency group",
    Severity.WARNING,
    RuleTarget.WORKFLOW_FILE,
)
def check_concurrency_group(workflow: WorkflowFile, config: LinterConfig) -> Iterator[Violation]:
    """Mutating runs for one issue or pull request are serialized and never cancelled."""
    triggers = workflow_triggers(workflow.data) & ISSUE_EVENT_TRIGGERS
    if not triggers or not grants_write(workflow.data):
        return
    settings = concurrency_settings(workflow.data)
    if not settings:
        yield Violation(
            line=find_key_line(workflow.text, "on"),
            message=f"Workflow triggered by {', '.join(sorted(triggers))} grants write access but declares no concurrency group",
            hint="Add `concurrency: {group: <workflow>-${{ github.event.issue.number }}, cancel-in-progress: false}`",
        )
        return
    jobs_line = find_key_line(workflow.text, "jobs", top_level=True)
    for job_id, setting in settings:
        if isinstance(setting, dict) and setting.get("cancel-in-progress") is True:
            if job_id is None:
                scope = "workflow"
                anchor = find_key_line(workflow.text, "concurrency", top_level=True)
            else:
                scope = f"job '{job_id}'"
                anchor = find_key_line(workflow.text, job_id, start=jobs_line)
            yield Violation(
                line=find_key_line(workflow.text, "cancel-in-progress", start=anchor),
                message=f"Concurrency group on {scope} cancels in-progress runs that may be mid-mutation",
                hint="Set `cancel-in-progress: false` so queued runs wait instead",
            )


@register_rule(
    "WFC005",
    "Workflows declare explicit permissions",
    Severity.WARNING,
    RuleTarget.WORKFLOW_FILE,
)
def check_explicit_permissions(workflow: WorkflowFile, config: LinterConfig) -> Iterator[Violation]:
    """Permissions are declared at the top level or on every job."""
    if declares_permissions(workflow.data):
        return
    yield Violation(
        line=find_key_line(workflow.text, "jobs"),
        message="Workflow does not declare `permissions`; the token gets the repository default scope",
        hint="Declare the least privileges the workflow needs, e.g. `permissions: {issues: write}`",
    )
