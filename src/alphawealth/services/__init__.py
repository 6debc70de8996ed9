"""Service layer: aggregation, reporting, auth and live-view helpers."""
