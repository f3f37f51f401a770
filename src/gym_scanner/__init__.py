"""gym-scanner: scanned workout sheets, editable plans and guided sessions."""

__version__ = "0.3.0"
