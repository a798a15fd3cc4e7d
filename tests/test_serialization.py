import json
import math

import pandas as pd
import pytest
import utils

from ladrules import Binarizer
from ladrules import LADClassifier
from ladrules import RuleGenerator
from ladrules.binarization import IndicatorEncoding
from ladrules.binarization import ThresholdEncoding
from ladrules.exceptions import NotFittedError
from ladrules.serialization import JSONSerializer


def _json_round_trip(data: dict) -> dict:
    return json.loads(json.dumps(data))


@pytest.fixture
def mixed_dataset() -> tuple[pd.DataFrame, pd.Series]:
    return utils.mixed_dataset()


def test_binarizer(mixed_dataset: tuple[pd.DataFrame, pd.Series]):
    X, y = mixed_dataset
    binarizer = Binarizer(max_cutpoints=4).fit(X, y)

    deserialized = JSONSerializer.deserialize(
        _json_round_trip(JSONSerializer.serialize(binarizer)), Binarizer
    )

    assert deserialized.get_encodings() == binarizer.get_encodings()
    assert deserialized.max_cutpoints == 4
    pd.testing.assert_frame_equal(deserialized.transform(X), binarizer.transform(X))


def test_rule_generator(mixed_dataset: tuple[pd.DataFrame, pd.Series]):
    X, y = mixed_dataset
    binarizer = Binarizer(max_cutpoints=3).fit(X, y)
    generator = RuleGenerator(binarizer, max_degree=3).fit(X, y)

    deserialized = JSONSerializer.deserialize(
        _json_round_trip(JSONSerializer.serialize(generator)), RuleGenerator
    )

    assert deserialized.get_rules() == generator.get_rules()
    assert deserialized.fallback_label_ == generator.fallback_label_
    assert deserialized.max_degree == 3
    pd.testing.assert_series_equal(deserialized.predict(X), generator.predict(X))


def test_classifier(mixed_dataset: tuple[pd.DataFrame, pd.Series]):
    X, y = mixed_dataset
    model = LADClassifier(max_cutpoints=3, max_degree=3).fit(X, y)

    deserialized = JSONSerializer.deserialize(
        _json_round_trip(JSONSerializer.serialize(model)), LADClassifier
    )

    assert deserialized.get_params() == model.get_params()
    assert str(deserialized) == str(model)
    pd.testing.assert_series_equal(deserialized.predict(X), model.predict(X))
    assert deserialized.score(X, y) == model.score(X, y)


def test_not_fitted():
    with pytest.raises(NotFittedError):
        JSONSerializer.serialize(Binarizer())
    with pytest.raises(NotFittedError):
        JSONSerializer.serialize(LADClassifier())


def test_wrong_payload():
    X, y = utils.separable_dataset()
    data = JSONSerializer.serialize(Binarizer().fit(X, y))
    with pytest.raises(ValueError):
        JSONSerializer.deserialize(data, RuleGenerator)
    with pytest.raises(ValueError):
        JSONSerializer.serialize(object())


def test_encodings():
    encoding = ThresholdEncoding(
        column="x", cutpoints=(1.5, 0.5), scores=(0.8, float("nan"))
    )
    data = _json_round_trip(JSONSerializer.serialize(encoding))

    assert data["scores"] == [0.8, None]
    deserialized = JSONSerializer.deserialize(data, ThresholdEncoding)
    assert deserialized.cutpoints == (1.5, 0.5)
    assert math.isnan(deserialized.scores[1])

    encoding = IndicatorEncoding(column="flag", kind="boolean", values=(True, False))
    assert JSONSerializer.deserialize(
        _json_round_trip(JSONSerializer.serialize(encoding)), IndicatorEncoding
    ) == encoding


def test_incomplete_payload(mixed_dataset: tuple[pd.DataFrame, pd.Series]):
    X, y = mixed_dataset
    generator = RuleGenerator(Binarizer().fit(X, y), max_degree=2).fit(X, y)
    data = _json_round_trip(JSONSerializer.serialize(generator))

    with pytest.raises(ValueError):
        JSONSerializer.deserialize({"type": "Binarizer"}, Binarizer)

    without_rules = {key: value for key, value in data.items() if key != "rules"}
    with pytest.raises(ValueError):
        JSONSerializer.deserialize(without_rules, RuleGenerator)

    data["rules"] = [{"label": "low", "literals": [["a", True]], "claimed": 1}]
    with pytest.raises(ValueError):
        JSONSerializer.deserialize(data, RuleGenerator)

    data["rules"] = [{"label": "low", "literals": [[0, True], [0, False]]}]
    with pytest.raises(ValueError):
        JSONSerializer.deserialize(data, RuleGenerator)

    data["rules"] = []
    data["binarizer"]["encodings"][0]["type"] = "unknown"
    with pytest.raises(ValueError):
        JSONSerializer.deserialize(data, RuleGenerator)
