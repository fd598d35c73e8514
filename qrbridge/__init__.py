"""QR Bridge: camera feed to barcode decoder bridge for real-time QR scanning."""

__version__ = "1.0.0"
