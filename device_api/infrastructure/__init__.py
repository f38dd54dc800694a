"""Storage backends for the device store."""
