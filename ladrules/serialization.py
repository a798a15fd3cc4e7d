"""Contains JSON serializers of fitted binarizers, rule generators and
classifiers, registered in the decision-rules serialization registry.

Serialized form holds only JSON native types and is sufficient to reconstruct a
fitted model: feature encodings plus the ordered ruleset. Use
``decision_rules.serialization.JSONSerializer`` (re-exported here):

>>> data: dict = JSONSerializer.serialize(model)
>>> model = JSONSerializer.deserialize(data, LADClassifier)
"""
import math
from typing import Annotated
from typing import Any
from typing import Literal as TypingLiteral
from typing import Optional
from typing import Union

import numpy as np
from decision_rules.serialization import JSONSerializer
from decision_rules.serialization import SerializationModes
from decision_rules.serialization.utils import JSONClassSerializer
from decision_rules.serialization.utils import register_serializer
from pydantic import BaseModel
from pydantic import Field

from ladrules._helpers import to_python_scalar
from ladrules.binarization import Binarizer
from ladrules.binarization import IndicatorEncoding
from ladrules.binarization import ThresholdEncoding
from ladrules.classifier import LADClassifier
from ladrules.rules import Literal
from ladrules.rules import Pattern
from ladrules.rules import Rule
from ladrules.rules import RuleGenerator

__all__ = ["JSONSerializer", "SerializationModes"]


def _float_to_json(value: float) -> Optional[float]:
    # NaN is not valid JSON
    return None if math.isnan(value) else value


def _float_from_json(value: Optional[float]) -> float:
    return float("nan") if value is None else value


@register_serializer(IndicatorEncoding)
class _IndicatorEncodingSerializer(JSONClassSerializer):

    class _Model(BaseModel):
        type: TypingLiteral["indicator"]
        column: Any
        kind: str
        values: list[Any]

    @classmethod
    def _from_pydantic_model(cls, model: BaseModel) -> IndicatorEncoding:
        return IndicatorEncoding(
            column=model.column, kind=model.kind, values=tuple(model.values)
        )

    @classmethod
    def _to_pydantic_model(
        cls,
        instance: IndicatorEncoding,
        mode: SerializationModes,  # pylint: disable=unused-argument
    ) -> BaseModel:
        return cls._Model(
            type="indicator",
            column=to_python_scalar(instance.column),
            kind=instance.kind,
            values=[to_python_scalar(value) for value in instance.values],
        )


@register_serializer(ThresholdEncoding)
class _ThresholdEncodingSerializer(JSONClassSerializer):

    class _Model(BaseModel):
        type: TypingLiteral["threshold"]
        column: Any
        cutpoints: list[float]
        scores: list[Optional[float]]

    @classmethod
    def _from_pydantic_model(cls, model: BaseModel) -> ThresholdEncoding:
        return ThresholdEncoding(
            column=model.column,
            cutpoints=tuple(model.cutpoints),
            scores=tuple(_float_from_json(score) for score in model.scores),
        )

    @classmethod
    def _to_pydantic_model(
        cls,
        instance: ThresholdEncoding,
        mode: SerializationModes,  # pylint: disable=unused-argument
    ) -> BaseModel:
        return cls._Model(
            type="threshold",
            column=to_python_scalar(instance.column),
            cutpoints=list(instance.cutpoints),
            scores=[_float_to_json(score) for score in instance.scores],
        )


_ENCODING_SERIALIZERS: dict[type, type] = {
    IndicatorEncoding: _IndicatorEncodingSerializer,
    ThresholdEncoding: _ThresholdEncodingSerializer,
}


def _deserialize_encoding(
    model: BaseModel,
) -> Union[IndicatorEncoding, ThresholdEncoding]:
    if isinstance(model, _IndicatorEncodingSerializer._Model):
        return _IndicatorEncodingSerializer.deserialize(model)
    return _ThresholdEncodingSerializer.deserialize(model)


_EncodingModel = Annotated[
    Union[_IndicatorEncodingSerializer._Model, _ThresholdEncodingSerializer._Model],
    Field(discriminator="type"),
]


class _BinarizerParamsModel(BaseModel):
    threshold: float
    nominal_size: int
    max_cutpoints: int


@register_serializer(Binarizer)
class _BinarizerSerializer(JSONClassSerializer):

    class _Model(BaseModel):
        params: _BinarizerParamsModel
        feature_names_in: list[Any]
        encodings: list[_EncodingModel]

    @classmethod
    def _from_pydantic_model(cls, model: BaseModel) -> Binarizer:
        binarizer = Binarizer(**model.params.model_dump())
        binarizer.encodings_ = tuple(
            _deserialize_encoding(encoding) for encoding in model.encodings
        )
        binarizer.feature_names_in_ = tuple(model.feature_names_in)
        return binarizer

    @classmethod
    def _to_pydantic_model(
        cls, instance: Binarizer, mode: SerializationModes
    ) -> BaseModel:
        encodings = instance.get_encodings()
        return cls._Model(
            params=_BinarizerParamsModel(
                threshold=instance.threshold,
                nominal_size=instance.nominal_size,
                max_cutpoints=instance.max_cutpoints,
            ),
            feature_names_in=[
                to_python_scalar(name) for name in instance.feature_names_in_
            ],
            encodings=[
                _ENCODING_SERIALIZERS[type(encoding)]._to_pydantic_model(encoding, mode)
                for encoding in encodings
            ],
        )


class _RuleModel(BaseModel):
    label: Any
    literals: list[tuple[int, bool]]
    claimed: int = 0


class _RuleGeneratorParamsModel(BaseModel):
    max_degree: int
    n_jobs: int
    batch_size: int


@register_serializer(RuleGenerator)
class _RuleGeneratorSerializer(JSONClassSerializer):

    class _Model(BaseModel):
        params: _RuleGeneratorParamsModel
        binarizer: _BinarizerSerializer._Model
        classes: list[Any]
        fallback_label: Any
        label_name: Any = None
        feature_names: list[str]
        rules: list[_RuleModel]

    @classmethod
    def _from_pydantic_model(cls, model: BaseModel) -> RuleGenerator:
        generator = RuleGenerator(
            _BinarizerSerializer.deserialize(model.binarizer),
            **model.params.model_dump(),
        )
        generator.rules_ = tuple(
            Rule(
                label=rule.label,
                pattern=Pattern.from_literals(
                    Literal(feature, polarity) for feature, polarity in rule.literals
                ),
                claimed=rule.claimed,
            )
            for rule in model.rules
        )
        generator.fallback_label_ = model.fallback_label
        generator.classes_ = np.array(model.classes)
        generator.label_name_ = model.label_name
        generator.feature_names_ = tuple(model.feature_names)
        return generator

    @classmethod
    def _to_pydantic_model(
        cls, instance: RuleGenerator, mode: SerializationModes
    ) -> BaseModel:
        rules: tuple[Rule, ...] = instance.get_rules()
        return cls._Model(
            params=_RuleGeneratorParamsModel(
                max_degree=instance.max_degree,
                n_jobs=instance.n_jobs,
                batch_size=instance.batch_size,
            ),
            binarizer=_BinarizerSerializer._to_pydantic_model(instance.binarizer, mode),
            classes=[to_python_scalar(label) for label in instance.classes_],
            fallback_label=to_python_scalar(instance.fallback_label_),
            label_name=to_python_scalar(instance.label_name_),
            feature_names=list(instance.feature_names_),
            rules=[
                _RuleModel(
                    label=to_python_scalar(rule.label),
                    literals=[
                        (literal.feature, literal.polarity)
                        for literal in rule.pattern.literals
                    ],
                    claimed=rule.claimed,
                )
                for rule in rules
            ],
        )


class _ClassifierParamsModel(BaseModel):
    threshold: float
    nominal_size: int
    max_cutpoints: int
    max_degree: int
    n_jobs: int


@register_serializer(LADClassifier)
class _ClassifierSerializer(JSONClassSerializer):

    class _Model(BaseModel):
        params: _ClassifierParamsModel
        rule_generator: _RuleGeneratorSerializer._Model

    @classmethod
    def _from_pydantic_model(cls, model: BaseModel) -> LADClassifier:
        classifier = LADClassifier(**model.params.model_dump())
        generator: RuleGenerator = _RuleGeneratorSerializer.deserialize(
            model.rule_generator
        )
        classifier.binarizer_ = generator.binarizer
        classifier.rule_generator_ = generator
        classifier.classes_ = generator.classes_
        classifier.feature_names_in_ = np.asarray(
            generator.binarizer.feature_names_in_, dtype=object
        )
        classifier.n_features_in_ = len(classifier.feature_names_in_)
        return classifier

    @classmethod
    def _to_pydantic_model(
        cls, instance: LADClassifier, mode: SerializationModes
    ) -> BaseModel:
        instance._check_is_fitted()  # pylint: disable=protected-access
        params: dict = instance.get_params()
        params.pop("progress_callback")
        return cls._Model(
            params=_ClassifierParamsModel(**params),
            rule_generator=_RuleGeneratorSerializer._to_pydantic_model(
                instance.rule_generator_, mode
            ),
        )

