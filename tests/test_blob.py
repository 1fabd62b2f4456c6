from __future__ import annotations

import pytest
import requests

from conftest import make_response
from translator_client.core.errors import TransferError
from translator_client.storage.blob import BlobUploader


@pytest.fixture
def uploader(settings, http) -> BlobUploader:
    return BlobUploader(settings, http=http)


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [200, 201, 204])
async def test_put_sends_raw_bytes_with_pdf_content_type(uploader, http, status_code):
    http.put.return_value = make_response(status_code)

    await uploader.put("https://blob/x?sig=abc", b"%PDF-1.7")

    http.put.assert_called_once_with(
        "https://blob/x?sig=abc",
        data=b"%PDF-1.7",
        headers={"Content-Type": "application/pdf"},
        timeout=5.0,
    )


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [301, 403, 500])
async def test_non_2xx_is_transfer_error(uploader, http, status_code):
    http.put.return_value = make_response(status_code)

    with pytest.raises(TransferError) as excinfo:
        await uploader.put("https://blob/x", b"data")
    assert excinfo.value.status_code == status_code


@pytest.mark.asyncio
async def test_transport_failure_is_transfer_error(uploader, http):
    http.put.side_effect = requests.ConnectionError("reset")

    with pytest.raises(TransferError):
        await uploader.put("https://blob/x", b"data")
