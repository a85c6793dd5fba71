"""Assistant Relay - chat relay between a mobile client and remote assistants."""

__version__ = "1.0.0"
