"""Config, logging, storage and export."""
