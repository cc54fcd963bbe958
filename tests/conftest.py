# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Shared pytest fixtures and configuration for Airtable SDK tests.
"""

import pytest

from airtable_sdk.core.config import AirtableConfig


@pytest.fixture
def test_config():
    """Test configuration with safe defaults."""
    return AirtableConfig(
        api_url="https://api.example.com/v0",
        http_retries=1,
        http_backoff=0.0,
        http_timeout=5,
        http_jitter=False,
    )


@pytest.fixture
def sample_base_id():
    return "appTESTBASE000001"


@pytest.fixture
def sample_record_id():
    return "recTESTRECORD0001"


@pytest.fixture
def sample_fields():
    """Sample field set for testing."""
    return {"Word": "lurid", "Google": 6870000, "Next": True}
