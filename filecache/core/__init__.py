"""Settings, logging, errors and wiring."""
