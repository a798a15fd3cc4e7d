import numpy as np
import pandas as pd
import pytest
import utils

from ladrules.binarization import Binarizer
from ladrules.exceptions import NotFittedError
from ladrules.exceptions import RowCountMismatchError
from ladrules.exceptions import SchemaMismatchError
from ladrules.rules import Literal
from ladrules.rules import Pattern
from ladrules.rules import Rule
from ladrules.rules import RuleGenerator
from ladrules.rules import generate_candidates
from ladrules.rules.cache import PatternCoverageCache


def _fit(X: pd.DataFrame, y: pd.Series, **kwargs) -> RuleGenerator:
    binarizer = Binarizer().fit(X, y)
    return RuleGenerator(binarizer, **kwargs).fit(X, y)


def _remaining_after_search(generator: RuleGenerator) -> dict:
    return generator.degrees_[-1].remaining_counts


def test_pattern_bitset():
    pattern = Pattern.from_literals([Literal(3), Literal(0, False)])

    assert pattern.degree == len(pattern) == 2
    assert pattern.literals == (Literal(0, False), Literal(3))
    assert Literal(3) in pattern
    assert Literal(3, False) not in pattern
    assert pattern.has_feature(0) and not pattern.has_feature(1)
    assert pattern.with_literal(Literal(0)) is None
    assert set(pattern.sub_patterns()) == {
        Pattern.from_literals([Literal(3)]),
        Pattern.from_literals([Literal(0, False)]),
    }
    assert pattern.describe(["a", "b", "c", "d"]) == "NOT a AND d"
    with pytest.raises(ValueError):
        Pattern.from_literals([Literal(1), Literal(1, False)])


def test_literal_ids():
    assert Literal(2, True).id == 4
    assert Literal(2, False).id == 5
    assert Literal.from_id(5) == Literal(2, False)
    assert ~Literal(2) == Literal(2, False)


def test_empty_pattern_covers_all_rows():
    X_bin = np.zeros((7, 3), dtype=bool)
    mask = Pattern().covered_mask(X_bin)
    assert mask.shape == (7,)
    assert mask.all()
    assert Pattern().describe() == "TRUE"


def test_coverage_mask_length():
    X_bin = np.array([[True, False], [True, True], [False, True]])
    pattern = Pattern.from_literals([Literal(0), Literal(1, False)])
    assert pattern.covered_mask(X_bin).tolist() == [True, False, False]


def test_coverage_cache_extends_parent():
    X_bin = np.array([[True, False], [True, True], [False, True]])
    cache = PatternCoverageCache(X_bin)
    parent = Pattern.from_literals([Literal(0)])
    cache.set(parent, parent.covered_mask(X_bin))

    child = parent.with_literal(Literal(1))
    assert cache.get_or_calculate(child).tolist() == [False, True, False]
    assert len(cache) == 3

    cache.retain([child])
    assert len(cache) == 1


def test_candidates_respect_anti_monotonicity():
    frontier = [
        Pattern.from_literals([Literal(0)]),
        Pattern.from_literals([Literal(1)]),
    ]
    candidates = generate_candidates(frontier, features_count=3)
    assert [c.pattern for c in candidates] == [
        Pattern.from_literals([Literal(0), Literal(1)])
    ]
    # generated first from the first frontier pattern
    assert candidates[0].parent == frontier[0]
    assert candidates[0].literal == Literal(1)


def test_first_degree_candidates_order():
    candidates = generate_candidates([Pattern()], features_count=2)
    assert [c.literal for c in candidates] == [
        Literal(0, True),
        Literal(0, False),
        Literal(1, True),
        Literal(1, False),
    ]


def test_perfect_separation():
    X, y = utils.separable_dataset()
    generator = _fit(X, y)

    rules = generator.get_rules()
    assert rules == (
        Rule(label="B", pattern=Pattern.from_literals([Literal(0)]), claimed=5),
        Rule(label="A", pattern=Pattern.from_literals([Literal(0, False)]), claimed=5),
    )
    assert all(rule.degree == 1 for rule in rules)
    assert (generator.predict(X) == y).all()
    assert generator.apply(X).tolist() == [1] * 5 + [0] * 5
    assert generator.describe_rules() == [
        "IF x > 5.0 THEN class = B",
        "IF NOT x > 5.0 THEN class = A",
    ]


def test_indistinguishable_rows():
    X = pd.DataFrame({"x": [1.0, 1.0]})
    y = pd.Series(["A", "B"])
    generator = _fit(X, y)

    assert generator.get_rules() == ()
    assert generator.fallback_label_ == "A"
    assert generator.predict(X).tolist() == ["A", "A"]


def test_fallback_is_largest_remaining_class():
    X = pd.DataFrame({"x": [1, 1, 2, 1]})
    y = pd.Series(["A", "B", "B", "B"])
    generator = _fit(X, y)

    (rule,) = generator.get_rules()
    assert rule.label == "B"
    assert rule.claimed == 1
    # one "A" and two "B" rows left unclaimed
    assert _remaining_after_search(generator) == {"A": 1, "B": 2}
    assert generator.fallback_label_ == "B"


def test_row_count_mismatch_keeps_rules():
    X = pd.DataFrame({"x": np.arange(100, dtype=float)})
    y = pd.Series(["A"] * 50 + ["B"] * 50)
    generator = _fit(X, y)
    rules = generator.get_rules()

    with pytest.raises(RowCountMismatchError):
        generator.fit(X, y.iloc[:99])
    assert generator.get_rules() is rules
    assert generator.fallback_label_ == "A"


def test_rows_are_claimed_once():
    X, y = utils.nominal_dataset()
    reported = []
    generator = _fit(X, y, progress_callback=lambda d, r: reported.append((d, r)))
    class_sizes = y.value_counts().to_dict()

    assert len(reported) == len(generator.degrees_) > 0
    for (degree, remaining), summary in zip(reported, generator.degrees_):
        assert remaining == summary.remaining_counts
        claimed = dict.fromkeys(class_sizes, 0)
        for rule in generator.get_rules():
            if rule.degree <= degree:
                claimed[rule.label] += rule.claimed
        for label, size in class_sizes.items():
            assert claimed[label] + remaining[label] == size


def test_rules_sorted_by_degree():
    X, y = utils.nominal_dataset()
    generator = _fit(X, y)

    degrees = [rule.degree for rule in generator.get_rules()]
    assert degrees == sorted(degrees)
    for summary in generator.degrees_:
        rules_of_degree = [r for r in generator.get_rules() if r.degree == summary.degree]
        assert len(rules_of_degree) == summary.rules_count


def test_rules_cover_single_class_when_found():
    X, y = utils.nominal_dataset()
    generator = _fit(X, y)
    X_bin = generator.binarize(X)

    claimed = np.zeros(len(y), dtype=bool)
    for rule in generator.get_rules():
        covered = rule.covered_mask(X_bin)
        assert set(y[covered & ~claimed]) == {rule.label}
        claimed |= covered


def test_deterministic_classifier_reaches_full_accuracy():
    X, y = utils.nominal_dataset()
    generator = _fit(X, y)
    assert (generator.predict(X) == y).all()
    assert generator.predict(X).name == "decision"


def test_max_degree_limits_search():
    X, y = utils.nominal_dataset()
    generator = _fit(X, y, max_degree=1)

    assert all(rule.degree == 1 for rule in generator.get_rules())
    assert len(generator.degrees_) == 1
    assert generator.fallback_label_ in ("yes", "no")


def test_search_is_deterministic():
    X, y = utils.nominal_dataset()
    first = _fit(X, y)
    second = _fit(X, y)
    assert first.get_rules() == second.get_rules()
    assert first.fallback_label_ == second.fallback_label_
    assert first.predict(X).equals(second.predict(X))


def test_parallel_search_matches_sequential():
    X, y = utils.nominal_dataset()
    sequential = _fit(X, y, n_jobs=1)
    parallel = _fit(X, y, n_jobs=2, batch_size=3)
    assert parallel.get_rules() == sequential.get_rules()
    assert parallel.fallback_label_ == sequential.fallback_label_


def test_progress_callback():
    X, y = utils.nominal_dataset()
    calls = []
    generator = _fit(X, y, progress_callback=lambda d, r: calls.append((d, r)))

    assert [degree for degree, _ in calls] == [s.degree for s in generator.degrees_]
    assert calls[0][0] == 1
    assert set(calls[-1][1].keys()) == {"yes", "no"}


def test_predict_keeps_index():
    X, y = utils.separable_dataset()
    generator = _fit(X, y)
    X_new = pd.DataFrame({"x": [0.0, 100.0]}, index=["first", "second"])

    predictions = generator.predict(X_new)
    assert predictions.index.tolist() == ["first", "second"]
    assert predictions.tolist() == ["A", "B"]


def test_not_fitted():
    X, y = utils.separable_dataset()
    with pytest.raises(NotFittedError):
        RuleGenerator(Binarizer()).fit(X, y)
    with pytest.raises(NotFittedError):
        RuleGenerator(Binarizer().fit(X, y)).predict(X)


def test_refitted_binarizer():
    X, y = utils.separable_dataset()
    binarizer = Binarizer().fit(X, y)
    generator = RuleGenerator(binarizer).fit(X, y)

    binarizer.fit(X.assign(other=["a", "b"] * 5), y)
    with pytest.raises(SchemaMismatchError):
        generator.predict(X.assign(other=["a", "b"] * 5))
