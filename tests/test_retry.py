from unittest.mock import Mock

from df_installer.retry import DOCKER_RECHECK, WEB_APP_READINESS, RetryPolicy, poll_until


def test_policies_match_documented_limits():
    assert (DOCKER_RECHECK.max_attempts, DOCKER_RECHECK.delay_seconds) == (3, 3.0)
    assert (WEB_APP_READINESS.max_attempts, WEB_APP_READINESS.delay_seconds) == (30, 2.0)


def test_stops_on_first_success():
    probe = Mock(side_effect=[False, False, True, True])
    sleep = Mock()

    assert poll_until(RetryPolicy("t", 5, 1.5), probe, sleep=sleep) is True
    assert probe.call_count == 3
    assert [c.args[0] for c in probe.call_args_list] == [1, 2, 3]
    assert sleep.call_count == 2
    sleep.assert_called_with(1.5)


def test_never_exceeds_max_attempts():
    probe = Mock(return_value=False)
    sleep = Mock()

    assert poll_until(RetryPolicy("t", 4, 2.0), probe, sleep=sleep) is False
    assert probe.call_count == 4
    # no sleep after the final attempt
    assert sleep.call_count == 3


def test_on_retry_can_stop_early():
    probe = Mock(return_value=False)
    on_retry = Mock(side_effect=[True, False])
    sleep = Mock()

    assert poll_until(RetryPolicy("t", 10, 1.0), probe, on_retry=on_retry, sleep=sleep) is False
    assert probe.call_count == 2
    assert sleep.call_count == 1


def test_on_retry_not_consulted_after_last_attempt():
    on_retry = Mock(return_value=True)

    poll_until(RetryPolicy("t", 2, 0), Mock(return_value=False), on_retry=on_retry, sleep=Mock())

    on_retry.assert_called_once_with(1)
