"""Custom exceptions for the dvpackager pipeline"""

class PackagerError(Exception):
    """
    Base exception for all dvpackager errors.

    Attributes:
        message (str): A description of the error.
        module (str): The module where the error originated.

    Usage:
        raise PackagerError("An error occurred", module="remux")
    """
    def __init__(self, message: str, module: str = None):
        self.message = message
        self.module = module
        super().__init__(f"[{module or 'unknown'}] {message}")

class ConfigurationError(PackagerError):
    """
    Exception raised for an invalid option or option combination.

    Detected before any input is touched; aborts the whole run.
    """
    pass

class InvalidOption(ConfigurationError):
    """Exception raised when an option value is outside its allowed set."""
    pass

class DependencyError(PackagerError):
    """
    Exception raised when a required external tool (ffmpeg, dvrescue) is missing.
    """
    pass

class CommandExecutionError(PackagerError):
    """
    Exception raised when a subprocess command fails during execution.
    """
    pass

class AnalysisError(PackagerError):
    """
    Exception raised when the analysis tool fails to produce a metadata log.

    Terminal for the input being analysed; the run moves on to the next input.
    """
    pass

class SourceAcquisitionError(PackagerError):
    """
    Exception raised when the metadata log reports an error for its media.
    """
    pass

class MalformedMetadata(PackagerError):
    """
    Exception raised when the metadata log lacks required fields or is out of order.
    """
    pass

class RemuxFailure(PackagerError):
    """
    Exception raised when ffmpeg fails to produce the output for one range.

    Only that range is skipped.
    """
    pass
