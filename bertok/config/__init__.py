# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""YAML configuration, validated into frozen pydantic models."""
