"""defapps - pick default applications per MIME type."""

__app_name__ = "defapps"
__version__ = "1.0.0"
