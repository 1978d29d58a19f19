"""HTTP transport for fiscalcontrol."""

from fiscalcontrol.api.app import create_app

__all__ = ["create_app"]
