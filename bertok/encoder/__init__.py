# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Sequence encoding: fixed-length id, mask and segment rows for a BERT model,
plus conversion to torch tensors for whatever runs the model.
"""
