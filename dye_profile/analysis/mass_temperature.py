# ============================================================================
# dye_profile/analysis/mass_temperature.py - 质量与温度变化
# ============================================================================

from typing import Dict

import numpy as np
import pandas as pd

from .solvent_front import confidence_interval

REPLICATES = (1, 2, 3)

REQUIRED_COLUMNS = ["Solvent", "RPM"] + [
    f"{prefix}_R{i}" for prefix in ("M0", "MF", "TInitial", "TFinal") for i in REPLICATES
]


def load_table(path) -> pd.DataFrame:
    df = pd.read_csv(path)
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"表格缺少列: {', '.join(missing)}")
    return df


def _difference_stats(df: pd.DataFrame, start: str, end: str) -> pd.DataFrame:
    start_values = df[[f"{start}_R{i}" for i in REPLICATES]].to_numpy(dtype=np.float64)
    end_values = df[[f"{end}_R{i}" for i in REPLICATES]].to_numpy(dtype=np.float64)
    diff = end_values - start_values

    mean = diff.mean(axis=1)
    std = diff.std(axis=1, ddof=1)
    lower, upper = confidence_interval(mean, std, n=len(REPLICATES))
    return pd.DataFrame({
        "Solvent": df["Solvent"].to_numpy(),
        "RPM": df["RPM"].to_numpy(),
        "mean": mean,
        "std": std,
        "ci_lower": lower,
        "ci_upper": upper,
    })


def mass_difference(df: pd.DataFrame) -> pd.DataFrame:
    """残余溶剂质量 MF - M0"""
    return _difference_stats(df, "M0", "MF")


def temperature_difference(df: pd.DataFrame) -> pd.DataFrame:
    """温度变化 TFinal - TInitial"""
    return _difference_stats(df, "TInitial", "TFinal")


def split_by_solvent(stats: pd.DataFrame) -> Dict[str, pd.DataFrame]:
    """按溶剂分组，保持首次出现顺序"""
    return {
        name: group.reset_index(drop=True)
        for name, group in stats.groupby("Solvent", sort=False)
    }
