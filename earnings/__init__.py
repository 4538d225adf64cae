"""Core (UI-agnostic) earnings tracker logic.

This package contains:
- field parsing and CSV record parsing (text -> entries)
- duplicate-safe ingestion and the entry store
- week/day bucketing, rollups and 4-week goal cycles
- page compute functions (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
