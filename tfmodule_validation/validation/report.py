"""Validation report: recorded field mismatches for one validation run.

Validators never raise on a mismatch. Each comparison is recorded here so a
single run surfaces every difference between the deployed resources and the
expectations; callers decide once, at the end, whether the run passed.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class FieldMismatch:
    """One failed comparison.

    Attributes:
        subject: Resource the field belongs to (e.g. "plan:basicPlanSample-...")
        field: Field path within the resource (e.g. "sku.size")
        expected: Expected value
        actual: Value read from Azure or Terraform
    """

    subject: str
    field: str
    expected: Any
    actual: Any

    def describe(self) -> str:
        return f"{self.subject}: {self.field} expected {self.expected!r}, got {self.actual!r}"


@dataclass
class ValidationReport:
    name: str
    mismatches: List[FieldMismatch] = field(default_factory=list)
    checks: int = 0

    @property
    def passed(self) -> bool:
        return not self.mismatches

    def check_equal(self, subject: str, field_name: str, expected: Any, actual: Any) -> bool:
        """Record a mismatch unless expected == actual."""
        self.checks += 1
        if expected == actual:
            return True
        self.mismatches.append(FieldMismatch(subject, field_name, expected, actual))
        return False

    def check_true(
        self, subject: str, field_name: str, condition: bool, expected: Any, actual: Any
    ) -> bool:
        """Record a mismatch unless condition holds."""
        self.checks += 1
        if condition:
            return True
        self.mismatches.append(FieldMismatch(subject, field_name, expected, actual))
        return False

    def check_contains(
        self, subject: str, field_name: str, value: Optional[str], substring: str
    ) -> bool:
        """Record a mismatch unless value is non-null and contains substring."""
        return self.check_true(
            subject,
            field_name,
            value is not None and substring in value,
            f"contains {substring!r}",
            value,
        )

    def merge(self, other: "ValidationReport") -> "ValidationReport":
        """Fold another report's checks and mismatches into this one."""
        self.mismatches.extend(other.mismatches)
        self.checks += other.checks
        return self

    def summary(self) -> str:
        status = "PASSED" if self.passed else "FAILED"
        lines = [
            f"{self.name}: {status} ({self.checks} checks, {len(self.mismatches)} mismatches)"
        ]
        lines.extend(f"  - {m.describe()}" for m in self.mismatches)
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "passed": self.passed,
            "checks": self.checks,
            "mismatches": [
                {
                    "subject": m.subject,
                    "field": m.field,
                    "expected": m.expected,
                    "actual": m.actual,
                }
                for m in self.mismatches
            ],
        }


def generate_markdown_report(report: ValidationReport) -> str:
    """Render a report as markdown.

    Example:
        >>> report = ValidationReport(name="basic")
        >>> report.check_equal("plan:p", "kind", "Windows", "Windows")
        True
        >>> "PASSED" in generate_markdown_report(report)
        True
    """
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    status = "PASSED" if report.passed else "FAILED"
    text = f"""# Validation Report: {report.name}

**Generated**: {timestamp}
**Status**: {status}
**Checks**: {report.checks}
**Mismatches**: {len(report.mismatches)}
"""

    if report.mismatches:
        text += """
## Mismatches

| Resource | Field | Expected | Actual |
|----------|-------|----------|--------|
"""
        for m in report.mismatches:
            text += f"| {m.subject} | {m.field} | `{m.expected!r}` | `{m.actual!r}` |\n"

    return text


def generate_json_report(report: ValidationReport) -> Dict[str, Any]:
    """Render a report as a JSON-serializable dictionary."""
    data = report.to_dict()
    data["generated"] = datetime.now().isoformat()
    # Expected/actual values may be tuples or other non-JSON types
    for mismatch in data["mismatches"]:
        for key in ("expected", "actual"):
            value = mismatch[key]
            if not isinstance(value, (str, int, float, bool, type(None))):
                mismatch[key] = repr(value)
    return data
