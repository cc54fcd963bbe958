# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""API-key authentication for the Airtable Web API."""

from __future__ import annotations

from typing import Dict, Union

from azure.core.credentials import AzureKeyCredential


class _AuthManager:
    """Personal access token holder producing bearer headers.

    Accepts a plain token string or an :class:`~azure.core.credentials.AzureKeyCredential`.
    The credential is read on every request, so rotating it with
    ``credential.update(new_key)`` takes effect immediately.
    """

    def __init__(self, credential: Union[str, AzureKeyCredential]) -> None:
        if isinstance(credential, str):
            if not credential.strip():
                raise ValueError("api_key is required.")
            credential = AzureKeyCredential(credential.strip())
        if not isinstance(credential, AzureKeyCredential):
            raise TypeError("credential must be a str or azure.core.credentials.AzureKeyCredential.")
        self.credential: AzureKeyCredential = credential

    def _auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.credential.key}"}
