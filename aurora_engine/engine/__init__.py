"""
Decision engine: pure functions from raw readings to a Decision.

Modules
-------
normalizer : normalize_window() + normalize_horizon(): clamp readings,
             tag absent optional signals.
darkness   : is_dark_enough() darkness veto + twilight_phase() bands.
scorer     : compute_components() + score_window() + classify_ads().
scanner    : scan_horizon() + diagnose_limiting_factor() + find_next_window().
directives : build_ui_directives() + determine_state() + windows_to_highlight().
narrative  : generate_explanation(): fixed templates keyed by
             (state, limiting factor).
pipeline   : compute_decision(): chains all of the above.

No module here performs I/O, caching, or holds state.
"""
