"""Watch an ArcGIS feature service for changes to one address and mail the diff."""

__version__ = "0.1.0"
