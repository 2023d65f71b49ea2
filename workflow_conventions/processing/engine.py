"""Orchestrates lint runs over Markdown guides and repository workflow files.

Files are read, parsed and handed to the registered rules for their target.
Failures to read or parse an input are reported as `PARSE001` findings so that
one broken file never hides the findings of the others.
"""

import time
from pathlib import Path
from typing import Callable

import structlog
from ruamel.yaml.error import YAMLError
from structlog.stdlib import BoundLogger

from workflow_conventions.configuration.models import LinterConfig
from workflow_conventions.parsing.classify import classify_block, is_workflow_mapping, script_family
from workflow_conventions.parsing.markdown import extract_code_blocks
from workflow_conventions.parsing.models import CodeBlock, ExampleKind, ScriptFile, WorkflowFile
from workflow_conventions.rules import Rule, RuleTarget, rules_for
from workflow_conventions.schemas.findings import Finding, LintReport, Severity
from workflow_conventions.utils.constants import MARKDOWN_SUFFIXES
from workflow_conventions.utils.yaml import load_yaml_text

logger: BoundLogger = structlog.get_logger(__name__)  # type: ignore

PARSE_ERROR_RULE_ID = "PARSE001"

_EXAMPLE_TARGETS = {
    ExampleKind.WORKFLOW: RuleTarget.DOC_WORKFLOW,
    ExampleKind.SCRIPT: RuleTarget.DOC_SCRIPT,
}


def _parse_error(path: str, message: str, line: int = 1) -> Finding:
    return Finding(rule_id=PARSE_ERROR_RULE_ID, severity=Severity.ERROR, message=message, path=path, line=line)


def _display_path(path: Path, root: Path | None = None) -> str:
    """Render a path relative to root when possible, with forward slashes."""
    if root is not None:
        try:
            return path.resolve().relative_to(root.resolve()).as_posix()
        except ValueError:
            pass
    return path.as_posix()


def _read_text(path: Path, display: str) -> str | Finding:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Failed to read file", path=display, error=str(exc))
        return _parse_error(display, f"Could not read file: {exc}")


def _apply_rules(
    rules: list[Rule],
    subject: object,
    config: LinterConfig,
    path: str,
    locate: Callable[[int], int] | None = None,
) -> list[Finding]:
    """Run rules against a subject. locate maps a violation line to a file line."""
    findings: list[Finding] = []
    for rule in rules:
        severity = config.severity_for(rule.rule_id, rule.default_severity)
        for violation in rule.check(subject, config):
            findings.append(
                Finding(
                    rule_id=rule.rule_id,
                    severity=severity,
                    message=violation.message,
                    path=path,
                    line=locate(violation.line) if locate is not None else violation.line,
                    hint=violation.hint,
                )
            )
    return findings


def lint_code_blocks(blocks: list[CodeBlock], path: str, config: LinterConfig) -> list[Finding]:
    """Apply documentation rules to the workflow and script examples among blocks."""
    findings: list[Finding] = []
    for block in blocks:
        kind = classify_block(block)
        target = _EXAMPLE_TARGETS.get(kind)
        if target is None:
            continue
        logger.debug("Checking example", path=path, line=block.start_line, kind=kind.value, language=block.language)
        findings.extend(_apply_rules(rules_for(target, config), block, config, path, locate=block.file_line))
    return findings


def lint_markdown_text(text: str, path: str, config: LinterConfig) -> list[Finding]:
    """Lint the fenced examples of one Markdown document."""
    return lint_code_blocks(extract_code_blocks(text, path), path, config)


def collect_markdown_files(paths: list[Path]) -> list[Path]:
    """Expand directories into the Markdown files beneath them, in sorted order."""
    files: list[Path] = []
    for path in paths:
        if path.is_dir():
            files.extend(sorted(p for p in path.rglob("*") if p.is_file() and p.suffix.lower() in MARKDOWN_SUFFIXES))
        else:
            files.append(path)
    # Preserve order while dropping duplicates from overlapping arguments.
    return list(dict.fromkeys(files))


def lint_markdown_files(paths: list[Path], config: LinterConfig, root: Path | None = None) -> LintReport:
    """Lint the fenced examples of Markdown files and directories."""
    report = LintReport()
    for file_path in collect_markdown_files(paths):
        display = _display_path(file_path, root)
        text = _read_text(file_path, display)
        report.files_checked += 1
        if isinstance(text, Finding):
            report.findings.append(text)
            continue
        blocks = extract_code_blocks(text, display)
        report.blocks_checked += len(blocks)
        report.findings.extend(lint_code_blocks(blocks, display, config))
    return report


def load_workflow_file(path: Path, root: Path) -> WorkflowFile | Finding:
    """Read and parse a workflow file, or return a PARSE001 finding if that fails."""
    display = _display_path(path, root)
    text = _read_text(path, display)
    if isinstance(text, Finding):
        return text
    try:
        data = load_yaml_text(text)
    except (YAMLError, ValueError) as exc:
        logger.error("Failed to parse workflow file", path=display, error=str(exc))
        mark = getattr(exc, "problem_mark", None)
        line = mark.line + 1 if mark is not None else 1
        return _parse_error(display, f"Workflow is not valid YAML: {getattr(exc, 'problem', None) or exc}", line)
    if not is_workflow_mapping(data):
        return _parse_error(display, "Workflow file must be a mapping with `on` and `jobs` keys")
    return WorkflowFile(path=display, text=text, data=data, root=str(root))


def lint_workflow_files(root: Path, config: LinterConfig) -> LintReport:
    """Lint every workflow file in the configured workflow directory."""
    report = LintReport()
    workflow_dir = root / config.workflow_dir
    if not workflow_dir.is_dir():
        logger.info("No workflow directory found", workflow_dir=str(workflow_dir))
        return report
    rules = rules_for(RuleTarget.WORKFLOW_FILE, config)
    for path in sorted(p for p in workflow_dir.iterdir() if p.is_file() and p.suffix in (".yml", ".yaml")):
        report.files_checked += 1
        workflow = load_workflow_file(path, root)
        if isinstance(workflow, Finding):
            report.findings.append(workflow)
            continue
        report.findings.extend(_apply_rules(rules, workflow, config, workflow.path))
    return report


def lint_script_files(root: Path, config: LinterConfig) -> LintReport:
    """Lint every script in the configured script directories."""
    report = LintReport()
    rules = rules_for(RuleTarget.SCRIPT_FILE, config)
    for script_dir in config.script_dirs:
        directory = root / script_dir
        if not directory.is_dir():
            logger.info("No script directory found", script_dir=str(directory))
            continue
        for path in sorted(p for p in directory.rglob("*") if p.is_file() and p.suffix.lower() in config.script_extensions):
            family = script_family(path.name)
            if family is None:
                logger.debug("Skipping script with unknown comment style", path=str(path))
                continue
            display = _display_path(path, root)
            text = _read_text(path, display)
            report.files_checked += 1
            if isinstance(text, Finding):
                report.findings.append(text)
                continue
            report.findings.extend(_apply_rules(rules, ScriptFile(path=display, text=text, family=family), config, display))
    return report


def lint_repository(root: Path, config: LinterConfig) -> LintReport:
    """Lint a repository's workflow files, companion scripts and Markdown guides."""
    start_time = time.time()
    docs = sorted({path for pattern in config.doc_globs for path in root.glob(pattern) if path.is_file()})
    report = (
        lint_workflow_files(root, config)
        .merge(lint_script_files(root, config))
        .merge(lint_markdown_files(docs, config, root=root))
    )
    logger.info(
        "Linted repository",
        root=str(root),
        duration=time.time() - start_time,
        files_checked=report.files_checked,
        finding_count=len(report.findings),
    )
    return report
