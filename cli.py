#!/usr/bin/env python3
"""Entry point for the dashboard overlay CLI."""

from dashboard_overlay_client.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
