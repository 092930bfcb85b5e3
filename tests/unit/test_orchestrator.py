"""Unit tests for IngestionOrchestrator -- upload intake and background processing."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import fitz
import pytest

from legallens.main import Application
from legallens.models.document import DocumentStatus
from legallens.pipeline.orchestrator import GENERIC_PROCESSING_ERROR, original_file_key
from legallens.providers.storage import keys
from legallens.utils.errors import NotFoundError
from tests.conftest import FakeLLMProvider


def _pdf_bytes(text: str) -> bytes:
    doc = fitz.open()
    doc.new_page().insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


class TestAcceptUpload:
    @pytest.mark.asyncio
    async def test_returns_processing_document(self, app: Application, contract_text: str) -> None:
        data = contract_text.encode()
        doc = await app.orchestrator.accept_upload("alice", "contract.txt", "text/plain", data)

        assert doc.status == DocumentStatus.PROCESSING
        assert doc.size == len(data)
        assert doc.stored_name == f"{doc.document_id}.txt"
        assert await app.storage.read(original_file_key(doc)) == data
        await app.drain()

    @pytest.mark.asyncio
    async def test_extension_from_media_type(self, app: Application) -> None:
        doc = await app.orchestrator.accept_upload("alice", "scan", "application/pdf", b"%PDF")
        assert doc.stored_name.endswith(".pdf")
        await app.drain()

    @pytest.mark.asyncio
    async def test_media_type_normalised(self, app: Application) -> None:
        doc = await app.orchestrator.accept_upload(
            "alice", "notes.txt", "Text/Plain; charset=utf-8", b"Some plain notes for the file."
        )
        assert doc.media_type == "text/plain"
        await app.drain()


class TestProcessDocument:
    @pytest.mark.asyncio
    async def test_success_path(
        self, app: Application, fake_llm: FakeLLMProvider, contract_text: str
    ) -> None:
        doc = await app.orchestrator.accept_upload(
            "alice", "contract.txt", "text/plain", contract_text.encode()
        )
        await app.drain()

        processed = await app.documents.get_document("alice", doc.document_id)
        assert processed.status == DocumentStatus.COMPLETED
        assert processed.summary == "Generated text."
        assert processed.content_length == len(contract_text)
        assert processed.processed_at is not None
        assert await app.content_store.load("alice", doc.document_id) == contract_text
        assert await app.indexer.exists("alice", doc.document_id)
        assert '"contract.txt"' in fake_llm.calls[0][1]

    @pytest.mark.asyncio
    async def test_pdf_upload(self, app: Application) -> None:
        doc = await app.orchestrator.accept_upload(
            "alice", "memo.pdf", "application/pdf", _pdf_bytes("Quarterly memo about fees.")
        )
        await app.drain()
        text = await app.content_store.load("alice", doc.document_id)
        assert "Quarterly memo about fees." in text

    @pytest.mark.asyncio
    async def test_empty_file(self, app: Application) -> None:
        doc = await app.orchestrator.accept_upload("alice", "empty.txt", "text/plain", b"")
        await app.drain()
        processed = await app.documents.get_document("alice", doc.document_id)
        assert processed.status == DocumentStatus.ERROR
        assert processed.error_code == "empty_file"
        assert processed.error == "The uploaded file is empty"

    @pytest.mark.asyncio
    async def test_corrupt_pdf(self, app: Application) -> None:
        doc = await app.orchestrator.accept_upload(
            "alice", "broken.pdf", "application/pdf", b"definitely not a pdf"
        )
        await app.drain()
        processed = await app.documents.get_document("alice", doc.document_id)
        assert processed.status == DocumentStatus.ERROR
        assert processed.error_code == "corrupted_or_unsupported"
        assert processed.summary is None

    @pytest.mark.asyncio
    async def test_unknown_binary(self, app: Application) -> None:
        doc = await app.orchestrator.accept_upload(
            "alice", "photo.png", "image/png", b"\x89PNG\r\n\x1a\n\x00\xff"
        )
        await app.drain()
        processed = await app.documents.get_document("alice", doc.document_id)
        assert processed.error_code == "unknown_type"

    @pytest.mark.asyncio
    async def test_index_failure_does_not_fail_document(self, app: Application) -> None:
        doc = await app.orchestrator.accept_upload("alice", "tiny.txt", "text/plain", b"Hi there.")
        await app.drain()
        processed = await app.documents.get_document("alice", doc.document_id)
        assert processed.status == DocumentStatus.COMPLETED
        assert await app.indexer.exists("alice", doc.document_id) is False

    @pytest.mark.asyncio
    async def test_unexpected_failure_recorded(self, app: Application, contract_text: str) -> None:
        app.content_store.save = AsyncMock(side_effect=RuntimeError("disk on fire"))
        doc = await app.orchestrator.accept_upload(
            "alice", "contract.txt", "text/plain", contract_text.encode()
        )
        await app.drain()
        processed = await app.documents.get_document("alice", doc.document_id)
        assert processed.status == DocumentStatus.ERROR
        assert processed.error == GENERIC_PROCESSING_ERROR
        assert processed.error_code == "processing_failed"

    @pytest.mark.asyncio
    async def test_deleted_before_processing(self, app: Application) -> None:
        assert await app.orchestrator.process_document("alice", "no-such-doc") is None

    @pytest.mark.asyncio
    async def test_deleted_during_processing(self, app: Application, contract_text: str) -> None:
        doc = await app.orchestrator.accept_upload(
            "alice", "contract.txt", "text/plain", contract_text.encode()
        )
        await app.documents.delete("alice", doc.document_id)
        await app.drain()
        assert await app.documents.list_documents("alice") == []

    @pytest.mark.asyncio
    async def test_deleted_while_extracting_leaves_no_artifacts(
        self, app: Application, contract_text: str
    ) -> None:
        started, release = asyncio.Event(), asyncio.Event()
        extract = app.orchestrator._extractor.extract_async

        async def gated_extract(data: bytes, media_type: str) -> str:
            started.set()
            await release.wait()
            return await extract(data, media_type)

        app.orchestrator._extractor.extract_async = gated_extract
        doc = await app.documents.upload("alice", "contract.txt", "text/plain", contract_text.encode())
        await started.wait()
        await app.documents.delete("alice", doc.document_id)
        release.set()
        await app.drain()

        assert await app.documents.list_documents("alice") == []
        assert await app.content_store.load("alice", doc.document_id) is None
        assert await app.indexer.exists("alice", doc.document_id) is False

    @pytest.mark.asyncio
    async def test_deleted_while_summarising_is_cleaned_up(
        self, app: Application, contract_text: str
    ) -> None:
        started, release = asyncio.Event(), asyncio.Event()
        summarize = app.summarizer.summarize

        async def gated_summarize(*args, **kwargs) -> str:
            started.set()
            await release.wait()
            return await summarize(*args, **kwargs)

        app.summarizer.summarize = gated_summarize
        doc = await app.documents.upload("alice", "contract.txt", "text/plain", contract_text.encode())
        await started.wait()
        assert await app.indexer.exists("alice", doc.document_id)
        await app.documents.delete("alice", doc.document_id)
        release.set()
        await app.drain()

        assert await app.documents.list_documents("alice") == []
        assert await app.storage.exists(keys.content_key("alice", doc.document_id)) is False
        assert await app.content_store.load("alice", doc.document_id) is None
        assert await app.indexer.exists("alice", doc.document_id) is False

    @pytest.mark.asyncio
    async def test_delete_just_before_final_update_stays_deleted(
        self, app: Application, contract_text: str
    ) -> None:
        repository = app.orchestrator._repository
        get = repository.get
        calls = 0

        async def get_then_delete(user_id: str, document_id: str):
            nonlocal calls
            document = await get(user_id, document_id)
            calls += 1
            if calls == 2:
                # The worker's post-extraction check has just passed.
                await app.documents.delete(user_id, document_id)
            return document

        repository.get = get_then_delete
        doc = await app.documents.upload("alice", "contract.txt", "text/plain", contract_text.encode())
        await app.drain()
        repository.get = get

        assert await app.documents.list_documents("alice") == []
        with pytest.raises(NotFoundError):
            await app.documents.get_document("alice", doc.document_id)
        assert await app.storage.exists(keys.content_key("alice", doc.document_id)) is False
        assert await app.indexer.exists("alice", doc.document_id) is False


class TestLazyRecovery:
    @pytest.mark.asyncio
    async def test_ensure_content_reextracts(self, app: Application, contract_text: str) -> None:
        doc = await app.orchestrator.accept_upload(
            "alice", "contract.txt", "text/plain", contract_text.encode()
        )
        await app.drain()
        await app.storage.delete(keys.content_key("alice", doc.document_id))
        app.content_store.evict("alice", doc.document_id)

        assert await app.orchestrator.ensure_content(doc) == contract_text
        assert await app.storage.exists(keys.content_key("alice", doc.document_id))

    @pytest.mark.asyncio
    async def test_ensure_content_without_original(self, app: Application, contract_text: str) -> None:
        doc = await app.orchestrator.accept_upload(
            "alice", "contract.txt", "text/plain", contract_text.encode()
        )
        await app.drain()
        await app.content_store.delete("alice", doc.document_id)
        await app.storage.delete(original_file_key(doc))

        assert await app.orchestrator.ensure_content(doc) is None

    @pytest.mark.asyncio
    async def test_ensure_index_builds_missing(self, app: Application, contract_text: str) -> None:
        doc = await app.orchestrator.accept_upload(
            "alice", "contract.txt", "text/plain", contract_text.encode()
        )
        await app.drain()
        await app.indexer.delete("alice", doc.document_id)

        assert await app.orchestrator.ensure_index(doc, contract_text) is True
        assert await app.indexer.exists("alice", doc.document_id)
