import math

import numpy as np
import pandas as pd
import pytest

from dye_profile.analysis.mass_temperature import (
    load_table,
    mass_difference,
    split_by_solvent,
    temperature_difference,
)
from dye_profile.analysis.solvent_front import (
    analyze_dataset,
    find_solvent_front,
    format_summary,
    reference_intensity,
)
from dye_profile.analysis.waterfall import load_waterfall, validate_axis
from dye_profile.utils.file_utils import collect_profile_csvs, parse_rpm
from dye_profile.utils.visualization import plot_difference, plot_solvent_front, plot_waterfall

DISTANCE = np.linspace(50, 0, 51)


def _step_profile(boundary, low=0.3, high=0.8):
    return np.where(DISTANCE >= boundary, low, high)


def _write_profile(path, boundaries):
    data = {"Distance (cm)": DISTANCE}
    for i, b in enumerate(boundaries, start=1):
        data[f"Redness R{i}"] = _step_profile(b)
    data["Average Redness"] = np.mean([data[f"Redness R{i}"] for i in (1, 2, 3)], axis=0)
    pd.DataFrame(data).to_csv(path, index=False)


@pytest.fixture
def profile_dir(tmp_path):
    folder = tmp_path / "profiles"
    folder.mkdir()
    _write_profile(folder / "W_1000_Rness.csv", (20, 22, 18))
    _write_profile(folder / "W_500_Rness.csv", (10, 10, 10))
    _write_profile(folder / "W_2000_Rness.csv", (30, 30, 33))
    (folder / "summary.csv").write_text("a,b\n1,2\n")
    return folder


def test_parse_rpm():
    assert parse_rpm("W_1500_Rness.csv") == 1500
    assert parse_rpm("summary.csv") is None
    assert parse_rpm("W_٥_Rness.csv") is None


def test_collect_profile_csvs_sorted_and_filtered(profile_dir):
    files = collect_profile_csvs(profile_dir)
    assert [rpm for rpm, _ in files] == [500, 1000, 2000]

    files = collect_profile_csvs(profile_dir, max_rpm=1000)
    assert [rpm for rpm, _ in files] == [500, 1000]


def test_reference_intensity_uses_top_window():
    assert reference_intensity(DISTANCE, _step_profile(20)) == pytest.approx(0.3)


def test_find_solvent_front():
    assert find_solvent_front(DISTANCE, _step_profile(20)) == 20.0


def test_find_solvent_front_not_found_returns_zero():
    assert find_solvent_front(DISTANCE, _step_profile(20), threshold=-1.0) == 0.0


def test_analyze_dataset(profile_dir):
    df = analyze_dataset(profile_dir)

    assert df["rpm"].tolist() == [500, 1000, 2000]
    row = df[df["rpm"] == 1000].iloc[0]
    assert (row["front_r1"], row["front_r2"], row["front_r3"]) == (20.0, 22.0, 18.0)
    assert row["mean"] == pytest.approx(20.0)
    assert row["std"] == pytest.approx(2.0)
    half = 1.96 * 2.0 / math.sqrt(3)
    assert row["ci_lower"] == pytest.approx(20.0 - half)
    assert row["ci_upper"] == pytest.approx(20.0 + half)

    summary = format_summary({"Water": df})
    assert "Dataset: Water" in summary
    assert "RPM 1000: 20.00 mm (Std: 2.0000)" in summary


def test_waterfall_series(profile_dir):
    series = load_waterfall(profile_dir, downsample=5)
    assert [s.rpm for s in series] == [500, 1000, 2000]
    assert len(series[0].distance) == 11
    assert series[0].distance[0] == 50.0
    np.testing.assert_allclose(series[0].std, 0.0)


def test_waterfall_axis_validation():
    with pytest.raises(ValueError):
        validate_axis(10, 5, 7)
    with pytest.raises(ValueError):
        validate_axis(0, 5, 1)


@pytest.fixture
def measurements(tmp_path):
    rows = []
    for solvent, offset in (("Water", 0.0), ("Ethanol", 1.0)):
        for rpm in (500, 1000):
            rows.append({
                "Solvent": solvent, "RPM": rpm,
                "M0_R1": 10.0, "M0_R2": 10.0, "M0_R3": 10.0,
                "MF_R1": 11.0 + offset, "MF_R2": 12.0 + offset, "MF_R3": 13.0 + offset,
                "TInitial_R1": 20.0, "TInitial_R2": 20.0, "TInitial_R3": 20.0,
                "TFinal_R1": 25.0, "TFinal_R2": 25.0, "TFinal_R3": 25.0,
            })
    path = tmp_path / "measurements.csv"
    pd.DataFrame(rows).to_csv(path, index=False)
    return path


def test_mass_and_temperature_differences(measurements):
    table = load_table(measurements)

    mass = mass_difference(table)
    water = mass[mass["Solvent"] == "Water"].iloc[0]
    assert water["mean"] == pytest.approx(2.0)
    assert water["std"] == pytest.approx(1.0)

    temperature = temperature_difference(table)
    assert temperature["mean"].tolist() == pytest.approx([5.0] * 4)
    assert temperature["std"].tolist() == pytest.approx([0.0] * 4)

    groups = split_by_solvent(mass)
    assert list(groups) == ["Water", "Ethanol"]
    assert groups["Ethanol"]["mean"].tolist() == pytest.approx([3.0, 3.0])


def test_load_table_requires_columns(tmp_path):
    path = tmp_path / "bad.csv"
    pd.DataFrame({"Solvent": ["Water"], "RPM": [500]}).to_csv(path, index=False)
    with pytest.raises(ValueError, match="M0_R1"):
        load_table(path)


def test_plots_are_written(profile_dir, measurements, tmp_path):
    fronts = {"Water": analyze_dataset(profile_dir)}
    assert plot_solvent_front(fronts, tmp_path / "front.png").exists()

    series = load_waterfall(profile_dir)
    assert plot_waterfall(series, tmp_path / "waterfall.png", 0.0, 50.0, 6).exists()

    mass = split_by_solvent(mass_difference(load_table(measurements)))
    assert plot_difference(mass, "Residual Solvent Mass (g)", tmp_path / "mass.png").exists()
