from ladrules.binarization._binarizer import Binarizer
from ladrules.binarization._binarizer import FeatureEncoding
from ladrules.binarization._encodings import IndicatorEncoding
from ladrules.binarization._encodings import ThresholdEncoding
from ladrules.binarization._scoring import rank_cutpoints
from ladrules.binarization._scoring import separation_score
from ladrules.binarization._scoring import separation_scores

__all__ = [
    "Binarizer",
    "FeatureEncoding",
    "IndicatorEncoding",
    "ThresholdEncoding",
    "rank_cutpoints",
    "separation_score",
    "separation_scores",
]
