# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tokenization subsystem.

Subsystems:
  - vocab: the closed sub-word vocabulary (token <-> id)
  - normalizer: Unicode cleanup and classification
  - basic: whitespace and punctuation segmentation
  - wordpiece: greedy longest-match sub-word segmentation
  - full: the two segmenters chained together plus id conversion
  - metrics, streaming, artifacts: tooling around a loaded tokenizer
"""
