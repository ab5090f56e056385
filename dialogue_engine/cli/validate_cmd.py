"""
Validation of JSON dialogue documents with location-aware reporting.

Uses DialogueLoader for parsing, then performs additional semantic checks
that the runtime would otherwise silently tolerate.
"""

import json
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional

from dialogue_engine.model.loader import DialogueLoader
from dialogue_engine.model.types import (
    DialogueAction,
    DialogueDocument,
    DialogueLine,
    GiveItemAction,
)


# ANSI color codes for terminal output
class Colors:
    RED = "\033[91m"
    YELLOW = "\033[93m"
    GREEN = "\033[92m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"
    BOLD = "\033[1m"
    RESET = "\033[0m"


@dataclass
class ValidationError:
    """Represents a validation issue with its location in the document"""

    severity: str  # 'error' or 'warning'
    location: str
    message: str
    suggestion: Optional[str] = None

    def to_dict(self):
        return {
            "severity": self.severity,
            "location": self.location,
            "message": self.message,
            "suggestion": self.suggestion,
        }


LOCATED = re.compile(r"^(?P<location>[\w\[\]\.]+): (?P<message>.*)$")


class DialogueValidator:
    """Validator for dialogue documents.

    Either point it at a file, or call validate_data() with content that
    was already read.
    """

    def __init__(self, file_path: Optional[Path] = None, quiet: bool = False):
        self.file_path = file_path
        self.quiet = quiet
        self.errors: List[ValidationError] = []
        self.warnings: List[ValidationError] = []
        self.document: Optional[DialogueDocument] = None
        self.stats: dict = {}

    def validate(self) -> bool:
        """Validate the file given to the constructor"""
        if self.file_path is None or not self.file_path.exists():
            self._add_error("file", f"File not found: {self.file_path}")
            self._report_results()
            return False

        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                content = f.read()
        except OSError as e:
            self._add_error("file", f"Cannot read file: {e}")
            self._report_results()
            return False

        return self.validate_text(content, default_id=self.file_path.stem)

    def validate_text(self, content: str, default_id: str = "") -> bool:
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            self._add_error(f"line {e.lineno}", f"Invalid JSON: {e.msg}", "Check for trailing commas and unquoted keys")
            self._report_results()
            return False

        return self.validate_data(data, default_id=default_id)

    def validate_data(self, data: Any, default_id: str = "") -> bool:
        loader = DialogueLoader()
        self.document = loader.parse_dict(data, default_id=default_id)

        # Step 1: loader problems
        self._convert_loader_issues(loader)

        # Step 2: semantic checks on the parsed tree
        if self.document is not None:
            self._validate_semantic(self.document)
            self.stats = loader.get_stats(self.document)

        self._report_results()
        return len(self.errors) == 0

    def _convert_loader_issues(self, loader: DialogueLoader):
        for error in loader.errors:
            self._add_located(error, "error")
        for warning in loader.warnings:
            self._add_located(warning, "warning")

    def _add_located(self, text: str, severity: str):
        match = LOCATED.match(text)
        location, message = (match.group("location"), match.group("message")) if match else ("document", text)
        if severity == "error":
            self._add_error(location, message)
        else:
            self._add_warning(location, message)

    def _validate_semantic(self, document: DialogueDocument):
        if not document.has_any_lines():
            self._add_error("document", "Dialogue has no lines", "Add 'lines' or at least one fork with lines")

        self._validate_lines(document.lines, "lines")
        self._validate_actions(document.actions, "actions")

        forks = document.forks or []
        for i, fork in enumerate(forks):
            path = f"forks[{i}]"
            self._validate_lines(fork.lines, f"{path}.lines")
            self._validate_actions(fork.actions, f"{path}.actions")
            if not fork.checks and i < len(forks) - 1:
                self._add_warning(path, "Fork has no checks, so later forks are unreachable", "Move catch-all forks last")
        if forks and document.lines and not forks[-1].checks:
            self._add_warning("lines", "Base lines are unreachable because the last fork always matches")

    def _validate_lines(self, lines: Optional[List[DialogueLine]], path: str):
        for i, line in enumerate(lines or []):
            line_path = f"{path}[{i}]"
            if not line.text and not line.text_key:
                self._add_warning(line_path, "Line has neither text nor textKey")
            if not line.options:
                continue

            seen = set()
            for j, option in enumerate(line.options):
                option_path = f"{line_path}.options[{j}]"
                if option.id in seen:
                    self._add_error(option_path, f"Duplicate option id '{option.id}'", "Only the first one can be selected")
                seen.add(option.id)

                if option.lines is None and option.actions is None and not option.branches:
                    self._add_warning(option_path, "Option has no lines, actions or branches")

                self._validate_lines(option.lines, f"{option_path}.lines")
                self._validate_actions(option.actions, f"{option_path}.actions")

                branches = option.branches or []
                for k, branch in enumerate(branches):
                    branch_path = f"{option_path}.branches[{k}]"
                    self._validate_lines(branch.lines, f"{branch_path}.lines")
                    self._validate_actions(branch.actions, f"{branch_path}.actions")
                    if not branch.checks and k < len(branches) - 1:
                        self._add_warning(branch_path, "Branch has no checks, so later branches are unreachable")

    def _validate_actions(self, actions: Optional[List[DialogueAction]], path: str):
        for i, action in enumerate(actions or []):
            action_path = f"{path}[{i}]"
            if isinstance(action, GiveItemAction) and action.amount is not None and action.amount < 1:
                self._add_warning(action_path, f"Amount {action.amount} is below 1 and will grant 1")

    def _add_error(self, location: str, message: str, suggestion: str = None):
        self.errors.append(ValidationError(severity="error", location=location, message=message, suggestion=suggestion))

    def _add_warning(self, location: str, message: str, suggestion: str = None):
        self.warnings.append(
            ValidationError(severity="warning", location=location, message=message, suggestion=suggestion)
        )

    def _report_results(self):
        if self.quiet:
            return

        name = self.file_path.name if self.file_path else "<content>"
        print(f"\n{Colors.BOLD}Validating: {name}{Colors.RESET}")
        print("=" * 60)

        for issue in self.errors:
            self._print_issue(issue, Colors.RED)
        for issue in self.warnings:
            self._print_issue(issue, Colors.YELLOW)

        if self.errors:
            print(f"\n{Colors.RED}❌ {len(self.errors)} error(s), {len(self.warnings)} warning(s){Colors.RESET}")
        elif self.warnings:
            print(f"\n{Colors.YELLOW}⚠️  Passed with {len(self.warnings)} warning(s){Colors.RESET}")
        else:
            print(f"\n{Colors.GREEN}✅ No issues found{Colors.RESET}")

    def _print_issue(self, issue: ValidationError, color: str):
        label = issue.severity.upper()
        print(f"{color}{label}{Colors.RESET} {Colors.CYAN}{issue.location}{Colors.RESET}: {issue.message}")
        if issue.suggestion:
            print(f"    {Colors.BLUE}💡 {issue.suggestion}{Colors.RESET}")


def main():
    """Main entry point"""
    if len(sys.argv) < 2:
        print("Usage: python -m dialogue_engine.cli.validate_cmd <dialogue.json> [more.json ...]")
        sys.exit(1)

    all_valid = True
    for arg in sys.argv[1:]:
        validator = DialogueValidator(Path(arg))
        if not validator.validate():
            all_valid = False

    sys.exit(0 if all_valid else 1)


if __name__ == "__main__":
    main()
