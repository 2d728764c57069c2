# validation/result.py
"""Container for validation outcomes."""

from typing import List


class ValidationResult:
    """Collects every failed check instead of stopping at the first one."""

    def __init__(self, name: str):
        self.name = name
        self.checks = []
        self.passed = 0
        self.failed = 0

    def add_check(self, description: str, passed: bool, details: str = ""):
        self.checks.append({
            'description': description,
            'passed': passed,
            'details': details,
        })
        if passed:
            self.passed += 1
        else:
            self.failed += 1

    def add_error(self, description: str, details: str = ""):
        self.add_check(description, False, details)

    def merge(self, other: 'ValidationResult'):
        for check in other.checks:
            self.add_check(check['description'], check['passed'], check['details'])

    @property
    def is_valid(self) -> bool:
        return self.failed == 0

    @property
    def errors(self) -> List[str]:
        return [c['description'] for c in self.checks if not c['passed']]

    def summary(self) -> str:
        status = "PASS" if self.failed == 0 else "FAIL"
        return f"{self.name}: {status} ({self.passed}/{self.passed + self.failed} checks)"

    def report(self) -> str:
        lines = [f"\n{'='*60}", f"{self.name}", "="*60]
        for check in self.checks:
            icon = "✓" if check['passed'] else "✗"
            lines.append(f"  {icon} {check['description']}")
            if check['details']:
                lines.append(f"      {check['details']}")
        lines.append(self.summary())
        return "\n".join(lines)
