"""Vehicle dashboard overlay client: telemetry gauges and a goal-seeking car task."""
