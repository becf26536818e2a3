"""Domain layer - library catalog and playback queue logic."""
