"""Counter for tokens, lines, and characters of the finished document.

Token counting uses OpenAI's tiktoken library, which is an optional
dependency installed with the ``token_counting`` extra. Lines and characters
are always counted. The cl100k_base encoding used for ``gpt-4`` gives a useful
approximation for most current models.
"""

import importlib.util
from collections import namedtuple
from typing import Any, Optional

from copytree.exceptions import TokenizationError, TokenizerNotAvailableError

CountResult = namedtuple("CountResult", ["lines", "tokens", "characters"])


def tiktoken_available() -> bool:
    return importlib.util.find_spec("tiktoken") is not None


class TokenCounter:
    """Running totals of lines, characters and, optionally, tokens.

    Without a model the counter still works but reports None for tokens.

    Attributes:
        model (Optional[str]): Name of the model whose tokenizer is used, or None.
        encoder (Optional[Any]): The tiktoken encoding, or None when tokens are not counted.

    Example:
        >>> counter = TokenCounter()
        >>> counter.count("first line\\nsecond line\\n")
        CountResult(lines=2, tokens=None, characters=23)
        >>> counter.total_lines
        2

    Raises:
        TokenizerNotAvailableError: If a model is given but tiktoken is not installed.
        ValueError: If tiktoken does not know the model.
    """

    def __init__(self, model: Optional[str] = None):
        self.model = model
        self.encoder: Optional[Any] = None

        if model is not None:
            if not tiktoken_available():
                raise TokenizerNotAvailableError(
                    "Token counting was requested with -t/--tokenizer, but tiktoken is not installed."
                )
            self.encoder = self._get_encoder(model)

        self.total_lines = 0
        self.total_characters = 0
        self.total_tokens: Optional[int] = None if self.encoder is None else 0

    @staticmethod
    def _get_encoder(model: str) -> Any:
        import tiktoken

        try:
            return tiktoken.encoding_for_model(model)
        except KeyError:
            raise ValueError(
                f"Could not load tokenizer for model '{model}'. Use a model tiktoken knows, such as "
                "'gpt-4' (cl100k_base encoding); its counts are a reasonable approximation for others."
            )

    def count(self, text: str) -> CountResult:
        """Count one piece of text and add it to the running totals.

        Args:
            text: The text to analyze.

        Returns:
            CountResult: Newlines, tokens (None when not counting tokens) and characters.

        Raises:
            TokenizationError: If the tokenizer fails on the text.
        """
        lines = text.count("\n")
        characters = len(text)
        tokens = None

        if self.encoder is not None:
            try:
                # Special-token text inside files is counted as ordinary text
                tokens = len(self.encoder.encode(text, disallowed_special=()))
            except Exception as e:
                raise TokenizationError(f"Failed to tokenize text: {e}")
            self.total_tokens = (self.total_tokens or 0) + tokens

        self.total_lines += lines
        self.total_characters += characters
        return CountResult(lines=lines, tokens=tokens, characters=characters)

    def reset_counts(self) -> None:
        """Reset the running totals, keeping the tokenizer.

        Example:
            >>> counter = TokenCounter()
            >>> _ = counter.count("Some text")
            >>> counter.reset_counts()
            >>> counter.total_characters
            0
        """
        self.total_lines = 0
        self.total_characters = 0
        self.total_tokens = None if self.encoder is None else 0
