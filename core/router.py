"""Rule matching - decides whether a request is intercepted."""

from collections.abc import Sequence
from dataclasses import dataclass

from core.config import Rule
from core.paths import ParsedPath, parse_path


@dataclass(frozen=True)
class RuleDecision:
    """Matching result for a request."""

    path: ParsedPath
    rule: Rule | None = None


class RuleEngine:
    """Evaluate configured rules in order; the first match wins."""

    def __init__(self, rules: Sequence[Rule] = (), base_path: str | None = None):
        self.rules = tuple(rules)
        self.base_path = base_path

    def match(self, resource: str | None, method: str) -> Rule | None:
        """Return the first rule for this resource and method, or None."""
        if not resource:
            return None
        upper_method = method.upper()
        for rule in self.rules:
            if rule.resource != resource:
                continue
            if "*" in rule.methods or upper_method in rule.methods:
                return rule
        return None

    def decide(self, path: str, method: str) -> RuleDecision:
        parsed = parse_path(path, self.base_path)
        return RuleDecision(path=parsed, rule=self.match(parsed.resource, method))


def match_rule(
    path: str,
    method: str,
    rules: Sequence[Rule],
    base_path: str | None = None,
) -> Rule | None:
    """Functional form of RuleEngine.decide for a raw path."""
    return RuleEngine(rules, base_path).decide(path, method).rule
