"""
toplangs.metrics — Language statistics.

Modules:
    languages — Accumulate per-language byte sizes and repository counts,
                apply size/count weighting, normalize to percentages.

All tunable defaults live in toplangs.config.TopLangsConfig.
"""
