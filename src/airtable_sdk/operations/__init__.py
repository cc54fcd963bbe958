# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Table-bound record operations."""

from .table import TableClient

__all__ = ["TableClient"]
