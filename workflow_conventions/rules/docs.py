"""Rules for workflow and script examples embedded in Markdown guides."""

from typing import Iterator

from workflow_conventions.configuration.models import LinterConfig
from workflow_conventions.parsing.classify import script_family
from workflow_conventions.parsing.models import CodeBlock
from workflow_conventions.parsing.workflows import commented_script_paths
from workflow_conventions.rules.registry import RuleTarget, Violation, register_rule
from workflow_conventions.rules.scripts import check_header_sections
from workflow_conventions.schemas.findings import Severity


@register_rule(
    "DOC001",
    "Workflow examples reference their script path in a comment",
    Severity.ERROR,
    RuleTarget.DOC_WORKFLOW,
)
def check_workflow_example_references_script(block: CodeBlock, config: LinterConfig) -> Iterator[Violation]:
    """Every workflow example carries a comment naming the script it pairs with."""
    if commented_script_paths(block.content, config.script_extensions):
        return
    where = f" under '{block.heading}'" if block.heading else ""
    yield Violation(
        line=1,
        message=f"Workflow example{where} has no comment referencing a script path",
        hint="Add a comment such as '# Logic lives in .github/scripts/<name>.js' next to the step that calls it",
    )


@register_rule(
    "DOC002",
    "Script examples start with a PURPOSE / CALLED BY / MAJOR RULES header",
    Severity.ERROR,
    RuleTarget.DOC_SCRIPT,
)
def check_script_example_header(block: CodeBlock, config: LinterConfig) -> Iterator[Violation]:
    """Every script example opens with a header block carrying the required sections."""
    family = script_family(block.language) or "hash"
    yield from check_header_sections(block.content, family, config.header_sections, subject="Script example")
