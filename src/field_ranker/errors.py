"""
Errors raised around a ranking run.

The ranking engine itself never raises for bad values; these cover the
configuration checks made before it is invoked.
"""


class ConfigurationMissingError(ValueError):
    """Raised when the source, target or group field cannot be resolved."""
