"""Cash Forecast - paycheck-to-paycheck balance projection."""

__version__ = "0.3.0"
