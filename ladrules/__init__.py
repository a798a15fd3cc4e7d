"""
Package implementing Logical Analysis of Data (LAD): binarization of tabular data
into boolean features and level-wise mining of prime patterns used as an ordered
list of classification rules.

It handles both nominal and numerical attributes.
"""
from ladrules.binarization import Binarizer
from ladrules.classifier import LADClassifier
from ladrules.rules import Literal
from ladrules.rules import Pattern
from ladrules.rules import Rule
from ladrules.rules import RuleGenerator
from ladrules.serialization import JSONSerializer

__all__ = [
    "Binarizer",
    "LADClassifier",
    "Literal",
    "Pattern",
    "Rule",
    "RuleGenerator",
    "JSONSerializer",
]
