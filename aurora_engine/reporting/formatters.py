"""
ASCII terminal formatters for CLI output.

All formatters accept engine models and return plain multi-line strings
suitable for ``typer.echo()``. They only display what the decision already
says; no formatter re-derives a decision.

No third-party dependencies (no ``rich``, no ``colorama``).
"""

from __future__ import annotations

from aurora_engine.engine.darkness import describe_darkness
from aurora_engine.engine.directives import windows_to_highlight
from aurora_engine.engine.narrative import limiting_factor_advice
from aurora_engine.models.decision import Decision
from aurora_engine.models.window import NormalizedWindow, ScoredWindow

_HIGHLIGHT_MARK = "*"


def format_decision_summary(decision: Decision) -> str:
    """Format the headline of a decision: state, best/next window, directives."""
    best = decision.best_window
    ui   = decision.ui_directives

    lines: list[str] = []
    lines.append("")
    lines.append("=== Aurora Decision ===")
    lines.append(f"  State:          {decision.state.upper()}")
    lines.append(
        f"  Best window:    {best.start.isoformat()} → {best.end.isoformat()}  "
        f"ADS {best.ads} ({best.classification})"
    )
    lines.append(f"  Limited by:     {best.limiting_factor}")
    if best.probability_from_forecast is not None:
        lines.append(f"  Feed estimate:  {best.probability_from_forecast:.0f}%")
    if decision.next_window is not None:
        nxt = decision.next_window
        lines.append(f"  Next window:    {nxt.timestamp.isoformat()}  ADS {nxt.ads}")
    lines.append(
        f"  Directives:     grid={'on' if ui.show_48_grid else 'off'}  "
        f"highlight={ui.highlight_top}  banner={'on' if ui.show_best_banner else 'off'}"
    )
    lines.append(f"  Computed at:    {decision.computed_at.isoformat()}")
    lines.append("")
    lines.append(f"  {decision.explanation}")
    lines.append(f"  {limiting_factor_advice(best.limiting_factor)}")
    return "\n".join(lines)


def format_horizon_grid(decision: Decision) -> str:
    """Format the scored horizon as one row per window.

    Highlighted windows (per the decision's directives) are marked with ``*``.
    When the directives hide the grid, a one-line notice is returned instead.
    """
    ui = decision.ui_directives
    if not ui.show_48_grid:
        return "  (hourly grid hidden: no window worth showing)"

    marked = set(windows_to_highlight(decision.windows, ui.highlight_top))

    header = (
        f"    {'':1}  {'Time':<25}  {'ADS':>3}  {'Class':<9}  "
        f"{'Dark':<4}  {'Phase':<21}"
    )
    lines = [header, "    " + "-" * (len(header) - 4)]
    for i, w in enumerate(decision.windows):
        lines.append(_format_window_row(w, _HIGHLIGHT_MARK if i in marked else ""))
    return "\n".join(lines)


def format_window_breakdown(window: NormalizedWindow, scored: ScoredWindow) -> str:
    """Format one window's score breakdown for ``score-window``."""
    comps = scored.component_breakdown
    lines: list[str] = []
    lines.append("")
    lines.append("=== Window Score ===")
    lines.append(f"  ADS:            {scored.ads} ({scored.classification})")
    lines.append(f"  Dark enough:    {'yes' if scored.is_dark_enough else 'no'} ({scored.twilight_phase})")
    lines.append("")
    lines.append(f"  Kp score:       {comps.kp_score:+7.2f}")
    lines.append(f"  Bz score:       {comps.bz_score:+7.2f}{_absent_note(window.bz_gsm_nano_tesla.is_present)}")
    lines.append(f"  Wind score:     {comps.wind_score:+7.2f}{_absent_note(window.solar_wind_speed_km_s.is_present)}")
    lines.append(f"  Density score:  {comps.density_score:+7.2f}{_absent_note(window.particle_density_per_cm3.is_present)}")
    lines.append(f"  Cloud penalty:  {-comps.cloud_penalty:+7.2f}")
    lines.append(f"  Raw sum:        {comps.raw_score:+7.2f}")

    darkness_note = describe_darkness(window.solar_elevation_degrees)
    if darkness_note:
        lines.append("")
        lines.append(f"  {darkness_note}")
    return "\n".join(lines)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _format_window_row(w: ScoredWindow, mark: str) -> str:
    return (
        f"    {mark:1}  {w.timestamp.isoformat():<25}  {w.ads:>3}  "
        f"{w.classification:<9}  {'yes' if w.is_dark_enough else 'no':<4}  "
        f"{w.twilight_phase:<21}"
    )


def _absent_note(present: bool) -> str:
    return "" if present else "  (absent)"
