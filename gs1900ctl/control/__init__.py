"""Write path through the switch's web interface."""

from gs1900ctl.control.web import WebControl, obfuscate_password

__all__ = ["WebControl", "obfuscate_password"]
