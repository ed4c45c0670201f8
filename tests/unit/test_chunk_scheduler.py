import pytest

from langfile_translator.chunk_scheduler import ProgressTracker, run_chunks, split_into_chunks
from langfile_translator.exceptions import BackendUnavailableError, TranslationRunError
from langfile_translator.models import TranslationResult


class TestSplitIntoChunks:

    def test_even_and_uneven_splits(self):
        items = [str(i) for i in range(25)]

        chunks = split_into_chunks(items, 10)

        assert [len(c) for c in chunks] == [10, 10, 5]
        assert [item for chunk in chunks for item in chunk] == items

    @pytest.mark.parametrize("chunk_size", [None, 0, -3])
    def test_no_chunking_means_one_chunk(self, chunk_size):
        assert split_into_chunks(["a", "b", "c"], chunk_size) == [["a", "b", "c"]]

    def test_empty_input(self):
        assert split_into_chunks([], 10) == []


class TestProgressTracker:

    def test_progress_never_decreases(self):
        reported = []
        tracker = ProgressTracker(4, lambda *args: reported.append(args))

        tracker.chunk_done(2)
        tracker.chunk_done(1)
        tracker.chunk_done(4)

        assert reported == [(50.0, 2, 4), (50.0, 2, 4), (100.0, 4, 4)]


class TestRunChunks:

    @pytest.mark.asyncio
    async def test_chunks_run_in_order_with_progress(self, stub_backend_factory):
        backend = stub_backend_factory(lambda text: text.upper())
        items = [f"item {i}" for i in range(18)]
        progress = []

        translated = await run_chunks(items, backend, "en", "sr", 5,
                                      lambda *args: progress.append(args))

        assert translated == [item.upper() for item in items]
        assert [len(batch) for batch in backend.batches] == [5, 5, 5, 3]
        assert progress == [(25.0, 1, 4), (50.0, 2, 4), (75.0, 3, 4), (100.0, 4, 4)]

    @pytest.mark.asyncio
    async def test_single_chunk_without_chunking(self, stub_backend_factory):
        backend = stub_backend_factory()
        progress = []

        await run_chunks(["a", "b"], backend, "en", "sr", None, lambda *args: progress.append(args))

        assert backend.batches == [["a", "b"]]
        assert progress == [(100.0, 1, 1)]

    @pytest.mark.asyncio
    async def test_zero_items_reports_completion(self, stub_backend_factory):
        backend = stub_backend_factory()
        progress = []

        translated = await run_chunks([], backend, "en", "sr", 10, lambda *args: progress.append(args))

        assert translated == []
        assert backend.batches == []
        assert progress == [(100.0, 0, 0)]

    @pytest.mark.asyncio
    async def test_hard_failure_aborts_the_run(self, stub_backend_factory):
        def answer(text):
            if text == "c":
                raise BackendUnavailableError("timed out", code="transport")
            return text.upper()

        backend = stub_backend_factory(answer)
        progress = []

        with pytest.raises(TranslationRunError) as excinfo:
            await run_chunks(["a", "b", "c", "d"], backend, "en", "sr", 2,
                             lambda *args: progress.append(args))

        assert excinfo.value.chunk_index == 2
        assert excinfo.value.total_chunks == 2
        assert isinstance(excinfo.value.__cause__, BackendUnavailableError)
        assert progress == [(50.0, 1, 2)]

    @pytest.mark.asyncio
    async def test_wrong_result_length_aborts(self):
        class ShortBackend:
            async def translate(self, items, source_lang, target_lang):
                return TranslationResult(tuple(items[:-1]), "short")

        with pytest.raises(TranslationRunError):
            await run_chunks(["a", "b"], ShortBackend(), "en", "sr", 10)
