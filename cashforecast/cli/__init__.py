"""Cash Forecast command-line interface."""
