"""
Shiftboard — Production TV Dashboard backend

Analytics core for turning spreadsheet-backed shift reports (one table per
factory sector, one row per day) into typed daily series and a fleet-level
"today or latest" summary.

Pipeline:
    RawTable JSON (loaders.sheets_api / loaders.workbook)
        -> loaders.display_table.parse_display_table   (per-sector series)
        -> kpis.compute_summary                        (fleet summary dict)
        -> dashboard / transforms                      (cards, frames, charts)

To onboard a new tenant:
    Add clients/<client_id>/dashboard.json with a title, the sectors'
    endpoints and a `columns` map pointing each logical column at the
    tenant's header names. Renamed headers are picked up through
    config.COLUMN_FALLBACKS.

To connect to Streamlit:
    Call dashboard.get_summary_overview(sectors, state) for the summary
    screen and dashboard.get_sector_view(sector, state) for each sector
    screen; both return plain dicts and DataFrames ready for Plotly.
"""
