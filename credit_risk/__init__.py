"""Store credit risk engine."""
