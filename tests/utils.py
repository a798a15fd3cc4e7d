import numpy as np
import pandas as pd


def separable_dataset() -> tuple[pd.DataFrame, pd.Series]:
    """Single numerical column, values below 5 are "A", values above are "B"."""
    X = pd.DataFrame({"x": [1.0, 2.0, 3.0, 4.0, 2.5, 6.0, 7.0, 8.0, 9.0, 10.0]})
    y = pd.Series(["A"] * 5 + ["B"] * 5, name="class")
    return X, y


def three_cutpoints_dataset() -> tuple[pd.DataFrame, pd.Series]:
    """Sorted by x the labels read A A B A A B B B, giving three candidate
    cutpoints: 2.5 (score 0.25), 3.5 (score 0.0625) and 5.5 (score 0.5625).
    """
    X = pd.DataFrame({"x": [1, 2, 3, 4, 5, 6, 7, 8]})
    y = pd.Series(["A", "A", "B", "A", "A", "B", "B", "B"], name="class")
    return X, y


def nominal_dataset(n_rows: int = 40, seed: int = 0) -> tuple[pd.DataFrame, pd.Series]:
    """Three nominal columns and a label being a deterministic function of them,
    so no two identical rows have different labels.
    """
    rng = np.random.default_rng(seed)
    X = pd.DataFrame(
        {
            "color": rng.choice(["red", "green", "blue"], size=n_rows),
            "shape": rng.choice(["circle", "square", "star"], size=n_rows),
            "size": rng.choice(["s", "m", "l"], size=n_rows),
        }
    )
    is_positive = ((X["color"] == "red") & (X["size"] != "l")) | (
        (X["shape"] == "star") & (X["color"] != "blue")
    )
    y = pd.Series(np.where(is_positive, "yes", "no"), name="decision")
    return X, y


def mixed_dataset(n_rows: int = 60, seed: int = 1) -> tuple[pd.DataFrame, pd.Series]:
    rng = np.random.default_rng(seed)
    X = pd.DataFrame(
        {
            "age": rng.integers(18, 80, size=n_rows),
            "income": np.round(rng.normal(50.0, 15.0, size=n_rows), 1),
            "smoker": rng.choice([True, False], size=n_rows),
            "region": rng.choice(["north", "south", "east"], size=n_rows),
        }
    )
    risk = (X["age"] > 50).astype(int) + X["smoker"].astype(int)
    y = pd.Series(
        np.select([risk == 0, risk == 1], ["low", "medium"], default="high"),
        name="risk",
    )
    return X, y
