from unittest.mock import AsyncMock, patch

import pytest

from langfile_translator.retry import RetryPolicy


class TestRetryPolicy:

    def test_fixed_delay(self):
        policy = RetryPolicy(base_delay=2.0)

        assert [policy.delay_for(n) for n in (1, 2, 5)] == [2.0, 2.0, 2.0]

    def test_exponential_delay_is_capped(self):
        policy = RetryPolicy(base_delay=1.0, exponential=True, max_delay=5.0)

        assert 1.0 <= policy.delay_for(1) <= 2.0
        assert 4.0 <= policy.delay_for(3) <= 5.0
        assert policy.delay_for(10) == 5.0

    @pytest.mark.asyncio
    async def test_wait_until_exhausted(self):
        state = RetryPolicy(max_attempts=3, base_delay=2.0, max_elapsed_seconds=None).start()

        with patch("langfile_translator.retry.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            outcomes = [await state.wait("loading") for _ in range(3)]

        assert outcomes == [True, True, False]
        assert state.attempt == 3
        assert mock_sleep.await_count == 2
        mock_sleep.assert_awaited_with(2.0)

    def test_elapsed_time_limit(self):
        state = RetryPolicy(max_attempts=100, max_elapsed_seconds=0).start()

        assert state.exhausted()
