"""
Caller-side horizon assembly.

Submodules:
  horizon_loader: JSON / CSV horizon files → RawWindow list
  signal_merge  : merge independently fetched weather and space-weather
                   feeds into an hourly RawWindow horizon

Upstream fetchers themselves live in the serving layer; nothing here makes
network calls.
"""
