from typing import Any

import numpy as np
import pandas as pd
from pandas.api import types as pd_types

from ladrules.exceptions import ColumnTypeUnsupportedError
from ladrules.exceptions import RowCountMismatchError

BOOLEAN: str = "boolean"
NUMERIC: str = "numeric"
NOMINAL: str = "nominal"


def get_column_kind(column: pd.Series) -> str:
    """Classify a column as boolean, numeric or nominal.

    Args:
        column (pd.Series): column to classify

    Raises:
        ColumnTypeUnsupportedError: when dtype has no boolean encoding (datetimes,
            timedeltas, complex numbers, intervals, periods...)

    Returns:
        str: one of BOOLEAN, NUMERIC or NOMINAL
    """
    dtype = column.dtype
    if pd_types.is_bool_dtype(dtype):
        return BOOLEAN
    if isinstance(dtype, pd.CategoricalDtype):
        return NOMINAL
    if (
        pd_types.is_datetime64_any_dtype(dtype)
        or pd_types.is_timedelta64_dtype(dtype)
        or pd_types.is_complex_dtype(dtype)
    ):
        raise ColumnTypeUnsupportedError(
            f'Column "{column.name}" has unsupported dtype: {dtype}'
        )
    if pd_types.is_numeric_dtype(dtype):
        return NUMERIC
    if pd_types.is_object_dtype(dtype) or pd_types.is_string_dtype(dtype):
        return NOMINAL
    raise ColumnTypeUnsupportedError(
        f'Column "{column.name}" has unsupported dtype: {dtype}'
    )


def unique_stable(column: pd.Series) -> list[Any]:
    """Returns distinct non-null values of a column in first-observed order"""
    return list(column.dropna().unique())


def to_label_series(y: Any, index: pd.Index = None) -> pd.Series:
    if isinstance(y, pd.Series):
        return y
    return pd.Series(np.asarray(y), index=index)


def check_row_count(X: pd.DataFrame, y: pd.Series):
    if X.shape[0] != len(y):
        raise RowCountMismatchError(X.shape[0], len(y))


def to_python_scalar(value: Any) -> Any:
    """Converts numpy scalars to builtin Python ones so they can be dumped to JSON"""
    if isinstance(value, np.generic):
        return value.item()
    return value


def to_frame(X: Any) -> pd.DataFrame:
    if isinstance(X, pd.DataFrame):
        return X
    return pd.DataFrame(X)


def encode_labels(y: pd.Series) -> tuple[np.ndarray, list[Any]]:
    """Encodes labels as integer codes following first-observed label order.

    Args:
        y (pd.Series): labels

    Raises:
        ValueError: when labels contain missing values

    Returns:
        tuple[np.ndarray, list[Any]]: codes of each row and distinct labels
    """
    codes, uniques = pd.factorize(y, sort=False)
    if np.any(codes < 0):
        raise ValueError("Label column contains missing values")
    return codes.astype(np.intp), [to_python_scalar(label) for label in uniques]
