from .mass_temperature import load_table, mass_difference, split_by_solvent, temperature_difference
from .solvent_front import analyze_dataset, find_solvent_front, format_summary
from .waterfall import WaterfallSeries, load_waterfall

__all__ = [
    "WaterfallSeries",
    "analyze_dataset",
    "find_solvent_front",
    "format_summary",
    "load_table",
    "load_waterfall",
    "mass_difference",
    "split_by_solvent",
    "temperature_difference",
]
