# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
bertok: BERT-style WordPiece tokenization and sequence encoding.

Subsystems:
  - tokenizer: vocabulary, normalization, basic and WordPiece segmentation
  - encoder: fixed-length padded batches with attention and segment masks
  - config: frozen pydantic config loaded from YAML
  - cli: the `bertok` command
"""

from bertok.encoder.core import EncodedBatch, EncodedSequence, SequenceEncoder
from bertok.tokenizer.exceptions import TokenizerError, UnknownTokenError, VocabularyLoadError
from bertok.tokenizer.full.core import FullTokenizer
from bertok.tokenizer.vocab.core import Vocabulary

__version__ = "0.1.0"

__all__ = [
    "EncodedBatch",
    "EncodedSequence",
    "FullTokenizer",
    "SequenceEncoder",
    "TokenizerError",
    "UnknownTokenError",
    "Vocabulary",
    "VocabularyLoadError",
    "__version__",
]
