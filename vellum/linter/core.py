"""Core document checker infrastructure.

Parsing is fail-fast: the first structural error aborts it. Checking runs
afterwards over a successfully parsed document and collects every finding
from every rule, so users see all independent problems at once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Union

from vellum.config import CheckConfig
from vellum.errors import ParseError, VellumError
from vellum.ir.document import Document
from vellum.ir.span import Span
from vellum.parser.document import DocumentParser
from vellum.parser.markup import MarkupTree, parse_markup

from .rules import LintRule


class LintSeverity(Enum):
    """Severity levels for findings."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    HINT = "hint"


@dataclass
class LintFinding:
    """A single finding."""
    rule_id: str
    message: str
    severity: LintSeverity
    line: Optional[int] = None
    column: Optional[int] = None
    suggestion: Optional[str] = None
    code_context: Optional[str] = None

    @classmethod
    def from_error(cls, rule_id: str, error: VellumError,
                   severity: LintSeverity = LintSeverity.ERROR) -> "LintFinding":
        return cls(
            rule_id=rule_id,
            message=error.message,
            severity=severity,
            line=error.line,
            column=error.column,
            suggestion=error.suggestion,
        )


@dataclass
class LintResult:
    """Result of checking one document."""
    findings: List[LintFinding]
    errors: List[str]
    warnings: List[str]
    file_path: str = "untitled.vellum"
    rule_failures: List[str] = field(default_factory=list)

    def success(self) -> bool:
        """No parse failure, no crashed rule and no error-level finding."""
        return len(self.errors) == 0 and len(self.rule_failures) == 0 and self.error_count() == 0

    def has_issues(self) -> bool:
        return len(self.findings) > 0

    def error_count(self) -> int:
        return sum(1 for f in self.findings if f.severity == LintSeverity.ERROR)

    def warning_count(self) -> int:
        return sum(1 for f in self.findings if f.severity == LintSeverity.WARNING)


@dataclass
class LintContext:
    """Context provided to rules."""
    source_text: str
    file_path: str
    document: Document
    tree: MarkupTree
    config: CheckConfig = field(default_factory=CheckConfig)

    def get_lines(self) -> List[str]:
        return self.source_text.splitlines()

    def get_line(self, line_number: int) -> Optional[str]:
        """Get a specific source line (1-indexed)."""
        lines = self.get_lines()
        if 1 <= line_number <= len(lines):
            return lines[line_number - 1]
        return None

    def finding(
        self,
        rule_id: str,
        message: str,
        span: Optional[Span] = None,
        *,
        severity: LintSeverity = LintSeverity.ERROR,
        suggestion: Optional[str] = None,
    ) -> LintFinding:
        """Build a finding located at ``span`` with its source line attached."""
        line = span.line if span is not None else None
        column = span.column if span is not None else None
        return LintFinding(
            rule_id=rule_id,
            message=message,
            severity=severity,
            line=line,
            column=column,
            suggestion=suggestion,
            code_context=self.get_line(line).strip() if line is not None and self.get_line(line) else None,
        )


class DocumentLinter:
    """
    Checks Vellum documents.

    A document that fails to parse yields a single error finding from the
    ``parse`` rule. Otherwise every configured rule runs over the parsed
    document and all findings are collected.
    """

    def __init__(self, rules: Optional[List[LintRule]] = None, config: Optional[CheckConfig] = None,
                 custom_widgets: Iterable[str] = ()):
        if rules is None:
            from .builtin_rules import get_default_rules
            rules = get_default_rules()
        self.rules = rules
        self.config = config or CheckConfig()
        self.parser = DocumentParser(custom_widgets)
        self.logger = logging.getLogger(__name__)

    def lint_document(self, source: Union[str, bytes], file_path: str = "untitled.vellum") -> LintResult:
        """
        Parse and check a document.

        Args:
            source: Markup text, or raw bytes so that undecodable input is
                reported as an XML syntax error
            file_path: File path for messages

        Returns:
            LintResult with findings and status
        """
        findings: List[LintFinding] = []
        errors: List[str] = []
        warnings: List[str] = []
        source_text = source.decode("utf-8", errors="replace") if isinstance(source, bytes) else source

        try:
            tree = parse_markup(source)
            document = self.parser.parse_tree(tree)
        except ParseError as exc:
            exc.path = file_path
            self.logger.debug(f"Parse failed for {file_path}: {exc.message}")
            errors.append(f"Parse error: {exc.format()}")
            finding = LintFinding.from_error("parse", exc)
            if finding.line is not None:
                line = source_text.splitlines()[finding.line - 1:finding.line]
                finding.code_context = line[0].strip() if line else None
            findings.append(finding)
            return LintResult(findings=findings, errors=errors, warnings=warnings, file_path=file_path)

        context = LintContext(
            source_text=source_text,
            file_path=file_path,
            document=document,
            tree=tree,
            config=self.config,
        )

        rule_failures: List[str] = []
        for rule in self.rules:
            try:
                findings.extend(rule.check(context))
            except Exception as exc:
                self.logger.error(f"Rule {rule.rule_id} failed: {exc}", exc_info=True)
                rule_failures.append(f"Rule {rule.rule_id} encountered an error: {exc}")

        findings.sort(key=lambda f: (f.line or 0, f.column or 0))
        self.logger.debug(
            f"Checked {file_path}: {sum(f.severity == LintSeverity.ERROR for f in findings)} error(s), "
            f"{sum(f.severity == LintSeverity.WARNING for f in findings)} warning(s)"
        )
        return LintResult(findings=findings, errors=errors, warnings=warnings, file_path=file_path,
                          rule_failures=rule_failures)


__all__ = ["LintSeverity", "LintFinding", "LintResult", "LintContext", "DocumentLinter"]
