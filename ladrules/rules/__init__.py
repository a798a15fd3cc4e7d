from ladrules.rules._generator import RuleGenerator
from ladrules.rules._search import DegreeSummary
from ladrules.rules._search import PrimePatternSearch
from ladrules.rules._search import ProgressCallback
from ladrules.rules._search import generate_candidates
from ladrules.rules.patterns import Literal
from ladrules.rules.patterns import Pattern
from ladrules.rules.patterns import Rule

__all__ = [
    "DegreeSummary",
    "Literal",
    "Pattern",
    "PrimePatternSearch",
    "ProgressCallback",
    "Rule",
    "RuleGenerator",
    "generate_candidates",
]
