"""pdfmanager - personal document library manager."""

__version__ = "0.3.0"
