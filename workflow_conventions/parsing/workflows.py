"""Inspects workflow YAML: triggers, permissions, steps and the scripts they invoke."""

import re
from functools import lru_cache
from typing import Any, Iterator

from workflow_conventions.parsing.models import ScriptInvocation

_COMMENT_PATTERN = re.compile(r"(?:^|\s)#(.*)$")


@lru_cache(maxsize=32)
def script_path_pattern(extensions: tuple[str, ...]) -> re.Pattern[str]:
    """Build the pattern matching a script path with one of the given extensions.

    A leading `/` is allowed so that `${{ github.workspace }}/.github/scripts/x.js`
    yields `.github/scripts/x.js` after normalization. Paths inside a
    `scheme://` URL never match.
    """
    alternatives = "|".join(re.escape(extension.lstrip(".")) for extension in sorted(extensions, key=len, reverse=True))
    return re.compile(rf"(?<![\w.\-/:])(?!//)((?:[\w.\-]*/)*[\w.\-]*[\w\-]\.(?:{alternatives}))\b(?![\w/])")


def normalize_script_path(path: str) -> str:
    """Strip leading `/` and `./` segments from a script path."""
    while True:
        if path.startswith("./"):
            path = path[2:]
        elif path.startswith("/"):
            path = path[1:]
        else:
            return path


def find_script_paths(text: str, extensions: list[str]) -> list[str]:
    """Return normalized script paths mentioned in text, in order of appearance."""
    pattern = script_path_pattern(tuple(extensions))
    return [normalize_script_path(match.group(1)) for match in pattern.finditer(text)]


def split_comment(line: str) -> tuple[str, str | None]:
    """Split a YAML line into its content and its comment text.

    A `#` starts a comment at the start of a line or after whitespace, and only
    outside single or double quotes.
    """
    quote: str | None = None
    for index, char in enumerate(line):
        if quote is not None:
            if char == quote:
                quote = None
            continue
        if char in "\"'" and (index == 0 or line[index - 1] in " \t:[{,-"):
            quote = char
        elif char == "#" and (index == 0 or line[index - 1] in " \t"):
            return line[:index], line[index + 1 :]
    return line, None


def comment_lines(text: str) -> list[tuple[int, str]]:
    """Return (1-based line, comment text) for every comment in YAML text.

    Comment lines inside block scalars (e.g., a shell comment inside `run: |`)
    are included; both kinds document the step they sit in.
    """
    comments: list[tuple[int, str]] = []
    for number, line in enumerate(text.splitlines(), start=1):
        _, comment = split_comment(line)
        if comment is not None:
            comments.append((number, comment))
    return comments


def commented_script_paths(text: str, extensions: list[str]) -> set[str]:
    """Return the normalized script paths mentioned in comments."""
    paths: set[str] = set()
    for _, comment in comment_lines(text):
        paths.update(find_script_paths(comment, extensions))
    return paths


def find_line(text: str, needle: str, skip_comments: bool = True) -> int:
    """Return the 1-based line of the first occurrence of needle, or 1 if absent."""
    for number, line in enumerate(text.splitlines(), start=1):
        content = split_comment(line)[0] if skip_comments else line
        if needle in content:
            return number
    return 1


def find_key_line(text: str, key: str, start: int = 1, top_level: bool = False) -> int:
    """Return the 1-based line of the first mapping key with the given name.

    Args:
        text (str): The raw workflow text.
        key (str): The mapping key to look for.
        start (int): The 1-based line to start searching from.
        top_level (bool): Only match keys that are not indented.

    Returns:
        int: The line of the key, or start if it is not found.
    """
    indent = "" if top_level else r"\s*(?:-\s+)?"
    pattern = re.compile(rf"""^{indent}(?:{re.escape(key)}|"{re.escape(key)}"|'{re.escape(key)}')\s*:""")
    for number, line in enumerate(text.splitlines()[start - 1 :], start=start):
        if pattern.match(line):
            return number
    return start


def workflow_triggers(workflow: dict[Any, Any]) -> set[str]:
    """Return the names of the events that trigger a workflow."""
    triggers = workflow.get("on", workflow.get(True))
    if isinstance(triggers, str):
        return {triggers}
    if isinstance(triggers, list):
        return {str(trigger) for trigger in triggers}
    if isinstance(triggers, dict):
        return {str(trigger) for trigger in triggers}
    return set()


def iter_jobs(workflow: dict[Any, Any]) -> Iterator[tuple[str, dict[str, Any]]]:
    """Yield (job ID, job mapping) for every job in a workflow."""
    jobs = workflow.get("jobs")
    if not isinstance(jobs, dict):
        return
    for job_id, job in jobs.items():
        if isinstance(job, dict):
            yield str(job_id), job


def iter_steps(workflow: dict[Any, Any]) -> Iterator[tuple[str, dict[str, Any]]]:
    """Yield (job ID, step mapping) for every step in a workflow."""
    for job_id, job in iter_jobs(workflow):
        steps = job.get("steps")
        if not isinstance(steps, list):
            continue
        for step in steps:
            if isinstance(step, dict):
                yield job_id, step


def _permissions_grant_write(permissions: Any) -> bool:
    if isinstance(permissions, str):
        return permissions == "write-all"
    if isinstance(permissions, dict):
        return any(str(value) == "write" for value in permissions.values())
    return False


def grants_write(workflow: dict[Any, Any]) -> bool:
    """Return True if the workflow or any of its jobs grants a write permission."""
    if _permissions_grant_write(workflow.get("permissions")):
        return True
    return any(_permissions_grant_write(job.get("permissions")) for _, job in iter_jobs(workflow))


def declares_permissions(workflow: dict[Any, Any]) -> bool:
    """Return True if permissions are declared at the top level or on every job."""
    if "permissions" in workflow:
        return True
    jobs = list(iter_jobs(workflow))
    return bool(jobs) and all("permissions" in job for _, job in jobs)


def concurrency_settings(workflow: dict[Any, Any]) -> list[tuple[str | None, Any]]:
    """Return (job ID or None for top level, concurrency value) for every concurrency declaration."""
    settings: list[tuple[str | None, Any]] = []
    if "concurrency" in workflow:
        settings.append((None, workflow["concurrency"]))
    for job_id, job in iter_jobs(workflow):
        if "concurrency" in job:
            settings.append((job_id, job["concurrency"]))
    return settings


def find_script_invocations(workflow: dict[Any, Any], text: str, extensions: list[str]) -> list[ScriptInvocation]:
    """Return the scripts invoked by `run:` commands and `actions/github-script` steps.

    Args:
        workflow (dict[Any, Any]): The parsed workflow.
        text (str): The raw workflow text, used to locate each invocation.
        extensions (list[str]): Extensions that mark a token as a script path.

    Returns:
        list[ScriptInvocation]: One entry per distinct (job, path) pair.
    """
    invocations: list[ScriptInvocation] = []
    seen: set[tuple[str, str]] = set()
    for job_id, step in iter_steps(workflow):
        sources: list[tuple[str, str]] = []
        if isinstance(step.get("run"), str):
            sources.append(("run", step["run"]))
        uses = step.get("uses")
        step_with = step.get("with")
        if isinstance(uses, str) and uses.startswith("actions/github-script") and isinstance(step_with, dict):
            script = step_with.get("script")
            if isinstance(script, str):
                sources.append(("github-script", script))
        for source, body in sources:
            for raw_line in body.splitlines():
                # Shell comments inside `run:` document a script; they do not invoke it.
                if raw_line.lstrip().startswith(("#", "//")):
                    continue
                for path in find_script_paths(raw_line, extensions):
                    if (job_id, path) in seen:
                        continue
                    seen.add((job_id, path))
                    invocations.append(ScriptInvocation(path=path, line=find_line(text, path), job_id=job_id, source=source))
    return invocations
