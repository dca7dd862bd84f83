class FileError(Exception):
    """Exception raised for errors relating to a file."""
    def __init__(self, message: str) -> None:
        self.message = message

class ConfigError(Exception):
    """Exception raised for errors relating to the key configuration file."""
    def __init__(self, message: str) -> None:
        self.message = message
