"""Back office authorization engine: roles, permission resolution and access gating."""

__version__ = "0.3.0"
