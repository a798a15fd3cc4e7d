"""Conversion of fitted LAD models into rulesets of the
`decision-rules <https://github.com/ruleminer/decision-rules>`_ package.

Threshold literals become ElementaryCondition intervals over the original
numerical column and indicator literals become (possibly negated)
NominalConditions, so the exported rules refer to the original attributes
instead of binarized features.
"""
from typing import Any
from typing import Optional
from typing import Union

from decision_rules.classification import ClassificationConclusion
from decision_rules.classification import ClassificationRule
from decision_rules.classification import ClassificationRuleSet
from decision_rules.conditions import CompoundCondition
from decision_rules.conditions import ElementaryCondition
from decision_rules.conditions import LogicOperators
from decision_rules.conditions import NominalCondition
from decision_rules.core.condition import AbstractCondition

from ladrules.binarization import Binarizer
from ladrules.binarization import FeatureEncoding
from ladrules.binarization import ThresholdEncoding
from ladrules.classifier import LADClassifier
from ladrules.rules import Literal
from ladrules.rules import RuleGenerator


def literal_to_condition(
    literal: Literal,
    origins: list[tuple[FeatureEncoding, int]],
    column_names: list[Any],
) -> AbstractCondition:
    """Converts a literal into a condition over the original attribute.

    Args:
        literal (Literal): literal over binarized features
        origins (list[tuple[FeatureEncoding, int]]): encoding producing each
            binarized feature and position of its value or cutpoint
        column_names (list[Any]): original column names

    Returns:
        AbstractCondition: equivalent condition
    """
    encoding, position = origins[literal.feature]
    column_index: int = column_names.index(encoding.column)
    if isinstance(encoding, ThresholdEncoding):
        cutpoint: float = encoding.cutpoints[position]
        if literal.polarity:
            return ElementaryCondition(
                column_index=column_index,
                left=cutpoint,
                right=float("inf"),
                left_closed=False,
                right_closed=False,
            )
        return ElementaryCondition(
            column_index=column_index,
            left=float("-inf"),
            right=cutpoint,
            left_closed=False,
            right_closed=True,
        )
    condition = NominalCondition(
        column_index=column_index, value=encoding.values[position]
    )
    condition.negated = not literal.polarity
    return condition


def to_decision_ruleset(
    model: Union[RuleGenerator, LADClassifier],
    decision_attribute: Optional[str] = None,
) -> ClassificationRuleSet:
    """Exports rules of a fitted model as a decision-rules classification ruleset.
    Its default conclusion is the fallback label.

    Note that decision-rules rulesets resolve overlapping rules by voting, while
    LAD models use the first covering rule, so predictions of both may differ on
    rows covered by rules of different classes.

    Args:
        model (Union[RuleGenerator, LADClassifier]): fitted model
        decision_attribute (Optional[str], optional): name of the label column.
            Defaults to the name of label column seen during fit or "class".

    Returns:
        ClassificationRuleSet: exported ruleset
    """
    if isinstance(model, LADClassifier):
        model._check_is_fitted()  # pylint: disable=protected-access
        generator: RuleGenerator = model.rule_generator_
    else:
        generator = model
    generator.get_rules()
    binarizer: Binarizer = generator.binarizer
    if decision_attribute is None:
        decision_attribute = (
            "class" if generator.label_name_ is None else str(generator.label_name_)
        )
    column_names: list[Any] = list(binarizer.feature_names_in_)
    origins: list[tuple[FeatureEncoding, int]] = binarizer.feature_origins()

    rules: list[ClassificationRule] = []
    for rule in generator.get_rules():
        premise = CompoundCondition(
            subconditions=[
                literal_to_condition(literal, origins, column_names)
                for literal in rule.pattern.literals
            ],
            logic_operator=LogicOperators.CONJUNCTION,
        )
        rules.append(
            ClassificationRule(
                premise=premise,
                conclusion=ClassificationConclusion(
                    value=rule.label, column_name=decision_attribute
                ),
                column_names=column_names,
            )
        )
    ruleset = ClassificationRuleSet(rules=rules)
    ruleset.default_conclusion = ClassificationConclusion(
        value=generator.fallback_label_, column_name=decision_attribute
    )
    ruleset.decision_attribute = decision_attribute
    return ruleset
