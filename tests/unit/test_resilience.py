"""
Unit tests for resilience utilities.
"""

from unittest.mock import Mock, patch

import pytest

from bbhooks.utils.resilience import retry_with_backoff


class FlakyError(Exception):
    pass


@patch("bbhooks.utils.resilience.time.sleep")
def test_retries_until_success(mock_sleep):
    func = Mock(side_effect=[FlakyError("1"), FlakyError("2"), "ok"], __name__="func")

    result = retry_with_backoff(max_retries=3, base_delay=1.0, exceptions=(FlakyError,))(func)()

    assert result == "ok"
    assert func.call_count == 3
    assert [call.args[0] for call in mock_sleep.call_args_list] == [1.0, 2.0]


@patch("bbhooks.utils.resilience.time.sleep")
def test_raises_after_last_attempt(mock_sleep):
    func = Mock(side_effect=FlakyError("down"), __name__="func")

    with pytest.raises(FlakyError):
        retry_with_backoff(max_retries=2, exceptions=(FlakyError,))(func)()

    assert func.call_count == 2
    assert mock_sleep.call_count == 1


@patch("bbhooks.utils.resilience.time.sleep")
def test_other_exceptions_are_not_retried(mock_sleep):
    func = Mock(side_effect=KeyError("x"), __name__="func")

    with pytest.raises(KeyError):
        retry_with_backoff(max_retries=3, exceptions=(FlakyError,))(func)()

    assert func.call_count == 1
    mock_sleep.assert_not_called()


@patch("bbhooks.utils.resilience.time.sleep")
def test_delay_is_capped(mock_sleep):
    func = Mock(side_effect=[FlakyError(), FlakyError(), FlakyError(), "ok"], __name__="func")

    retry_with_backoff(max_retries=4, base_delay=10.0, max_delay=15.0, exceptions=(FlakyError,))(func)()

    assert [call.args[0] for call in mock_sleep.call_args_list] == [10.0, 15.0, 15.0]
