"""SOC Lens: log normalization and compliance statistics for SOC dashboards."""

__version__ = "0.1.0"
