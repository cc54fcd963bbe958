# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Page retrieval and lazy pagination."""

from ._fetcher import PageFetcher
from ._paging import IteratorState, PagingIterator

__all__ = ["PageFetcher", "IteratorState", "PagingIterator"]
