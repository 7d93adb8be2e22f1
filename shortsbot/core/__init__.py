"""Configuration, logging, storage and dependency wiring."""
