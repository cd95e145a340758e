"""Core configuration, input records and the channel pipeline."""
