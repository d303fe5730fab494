"""
Frozen pydantic models for engine inputs and outputs.

window   : RawWindow, SignalReading, NormalizedWindow, ScoreComponents, ScoredWindow.
decision : BestWindow, NextWindow, UIDirectives, Decision.
"""
