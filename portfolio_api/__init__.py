"""Portfolio website REST API."""
