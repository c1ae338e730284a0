"""
alerts — Geocoded alert records.

Sub-modules:
    models         — Alert record and its store wire format
    repository     — Supabase REST persistence
    alert_service  — orchestration: geocode, then persist
"""
