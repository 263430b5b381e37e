"""nistview: browsable NIST SP 800-53 control catalog with search, filters and export."""

__version__ = "0.1.0"
