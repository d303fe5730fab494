"""
Decision output: JSON / CSV export and ASCII terminal formatters.

Modules
-------
export     : write_decision_json() + flatten_windows_for_export() + export_windows_csv().
formatters : format_decision_summary() + format_horizon_grid() + format_window_breakdown().
"""
