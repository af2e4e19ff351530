__version__ = "0.1.0"

PROTOCOL_VERSION = "2.3"


def user_agent() -> str:
    return f"firebolt-client/{__version__}"
