"""Cache engine, metrics and sweeper."""
