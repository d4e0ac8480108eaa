# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Custom exceptions for the tokenizer subsystem.

Both concrete errors also inherit from the matching builtin (OSError for a
vocabulary that can't be read, KeyError for a missing token) so callers that
only know the builtin taxonomy still catch them.
"""


class TokenizerError(Exception):
    """Base for all tokenizer errors."""


class VocabularyLoadError(TokenizerError, OSError):
    """Raised when a vocabulary file cannot be read or decoded."""


class UnknownTokenError(TokenizerError, KeyError):
    """
    Raised when a token has no entry in the vocabulary during id conversion.

    WordPiece only ever emits vocabulary entries or the unknown-token sentinel,
    so hitting this means the vocabulary is missing the sentinel or someone
    passed hand-built tokens. It is a defect, not something to recover from.
    """

    def __init__(self, token: str) -> None:
        super().__init__(token)
        self.token = token

    def __str__(self) -> str:
        return f"Token not in vocabulary: {self.token!r}"
