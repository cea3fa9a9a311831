"""tarbs - Arch Linux post-install provisioning."""

__version__ = "0.1.0"
