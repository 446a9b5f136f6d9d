class CopyTreeError(Exception):
    """Base class for all errors raised by copytree.

    Errors deriving from this class are fatal for a run: the command-line
    interface reports them and exits with a non-zero status without delivering
    any output.
    """

    pass


class ConfigurationError(CopyTreeError, ValueError):
    """
    Exception raised when the run configuration is invalid or contradictory.

    Configuration errors are detected before traversal starts. Typical causes are
    a malformed glob or regular expression, a negative size limit, or more than one
    output destination being selected.

    Example:
        >>> error = ConfigurationError("Only one output destination may be selected")
        >>> isinstance(error, ValueError)
        True
    """

    pass


class RootNotFoundError(CopyTreeError, FileNotFoundError):
    """
    Exception raised when none of the supplied root paths can be read.

    Attributes:
        roots (tuple): The root paths that were requested.

    Example:
        >>> error = RootNotFoundError(["missing", "gone"])
        >>> str(error)
        'No readable root path among: missing, gone'
    """

    def __init__(self, roots) -> None:
        """
        Initialize the exception with the roots that were requested.

        Args:
            roots: Sequence of the root paths exactly as supplied by the caller.
        """
        self.roots = tuple(str(root) for root in roots)
        super().__init__(f"No readable root path among: {', '.join(self.roots)}")


class RunInterruptedError(CopyTreeError):
    """
    Exception raised when a run is stopped by SIGINT or SIGPIPE before delivery.

    Nothing is delivered once this is raised; the command-line interface exits with
    the status of the received signal.

    Example:
        >>> str(RunInterruptedError())
        'Run interrupted before delivery'
    """

    def __init__(self, message: str = "Run interrupted before delivery") -> None:
        super().__init__(message)


class DeliveryError(CopyTreeError):
    """
    Exception raised when the finished document cannot be delivered.

    Attributes:
        destination (str): Human-readable name of the destination that failed.

    Example:
        >>> error = DeliveryError("clipboard", "no copy/paste mechanism found")
        >>> str(error)
        'Failed to deliver output to clipboard: no copy/paste mechanism found'
    """

    def __init__(self, destination: str, reason: str) -> None:
        """
        Initialize the exception.

        Args:
            destination (str): Name of the destination (e.g. "clipboard" or a file path).
            reason (str): Description of the underlying failure.
        """
        self.destination = destination
        super().__init__(f"Failed to deliver output to {destination}: {reason}")


class TokenizerNotAvailableError(CopyTreeError):
    """
    Exception raised when attempting to use token counting functionality without the required tokenizer package.

    This exception is raised when the `tiktoken` package is not installed but token counting
    functionality is requested. The tiktoken package is an optional dependency that must be
    explicitly installed using the 'token_counting' extra.

    Attributes:
        message (str): Detailed error message including installation instructions.

    Example:
        >>> error = TokenizerNotAvailableError()
        >>> str(error).startswith('Tokenizer (tiktoken) is not installed')
        True
    """

    def __init__(self, message: str = "Tokenizer (tiktoken) is not installed.") -> None:
        """
        Initialize the exception with an informative error message.

        Args:
            message (str, optional): Base error message. Defaults to "Tokenizer (tiktoken) is not installed."
                Installation instructions will be appended to this message.
        """
        self.message = (
            f"{message} To enable token counting, install copytree with the 'token_counting' "
            "extra: 'pip install copytree[token_counting]'."
        )
        super().__init__(self.message)


class TokenizationError(CopyTreeError):
    """
    Exception raised when token counting fails during execution.

    Example:
        >>> error = TokenizationError("Failed to tokenize: invalid input")
        >>> str(error)
        'Failed to tokenize: invalid input'
    """

    pass
