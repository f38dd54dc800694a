"""FastAPI transport layer over the device service."""
