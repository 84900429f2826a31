"""Tests for echo and hz."""

import pytest

from ros2topics.commands.monitor import (
    UNBOUNDED,
    RateEstimator,
    cmd_echo,
    cmd_hz,
    format_frequency,
)
from ros2topics.core.result import ResultStatus


class TestRateEstimator:
    """Tests for the frequency estimate."""

    def test_reports_after_each_second(self):
        """Test arrivals at 0s, 1.2s and 2.5s give two reports."""
        estimator = RateEstimator(start_ns=0)

        reports = [estimator.observe(t) for t in (0, 1_200_000_000, 2_500_000_000)]

        assert reports[0] is None
        assert reports[1] == pytest.approx(1e9 / 1_200_000_000)
        assert reports[2] == pytest.approx(1e9 / 1_300_000_000)

    def test_no_report_within_window(self):
        """Test arrivals inside one second are silent."""
        estimator = RateEstimator(start_ns=0)

        reports = [estimator.observe(t) for t in range(0, 1_000_000_001, 100_000_000)]

        assert reports == [None] * len(reports)

    def test_uses_last_arrival(self):
        """Test the interval is since the previous arrival, not the window start."""
        estimator = RateEstimator(start_ns=0)
        for t in (100_000_000, 200_000_000, 1_000_000_000):
            estimator.observe(t)

        assert estimator.observe(1_100_000_000) == pytest.approx(10.0)
        assert estimator.window_start_ns == 1_100_000_000
        assert estimator.last_arrival_ns == 1_100_000_000

    def test_format(self):
        """Test the report line."""
        assert format_frequency(10.0) == "Freq : 10.000000 hz"


class TestEcho:
    """Tests for the echo command."""

    def test_prints_messages_as_json(self, context, middleware, output, make_message):
        """Test each received message is printed."""
        middleware.incoming = [
            make_message("std_msgs/msg/String", data="a"),
            make_message("std_msgs/msg/String", data="b"),
        ]

        result = cmd_echo(["echo", "/chatter", "std_msgs/msg/String", "3"], context)

        assert result.ok
        assert output == ['{"data": "a"}', '{"data": "b"}']
        node = middleware.nodes[0]
        assert node.spins == 3
        assert node.subscriptions[0].topic == "/chatter"
        assert node.subscriptions[0].destroyed
        assert node.destroy_count == 1

    def test_secondary_registry_fallback(self, context, middleware, output, make_message):
        """Test internal types resolve through the secondary registry."""
        middleware.incoming = [
            make_message("rcl_interfaces/srv/ListParameters_Request", names=["use_sim_time"]),
        ]

        result = cmd_echo(
            ["echo", "/p", "rcl_interfaces/srv/ListParameters_Request", "1"], context
        )

        assert result.ok
        assert output == ['{"names": ["use_sim_time"]}']

    def test_stops_on_cancellation(self, context, middleware, token):
        """Test an unbounded echo ends when cancelled."""
        token.cancel()

        result = cmd_echo(["echo", "/chatter", "std_msgs/msg/String"], context)

        assert result.ok
        assert middleware.nodes[0].spins == 0

    def test_default_is_unbounded(self):
        """Test the default tick budget."""
        import sys
        assert UNBOUNDED == sys.maxsize

    @pytest.mark.parametrize("argv,message", [
        (["echo"], "/topic must be specified"),
        (["echo", "/chatter"], "topic type must be specified"),
    ])
    def test_missing_arguments(self, argv, message, context, middleware):
        """Test missing arguments."""
        result = cmd_echo(argv, context)

        assert result.status == ResultStatus.USAGE
        assert result.message == message
        assert middleware.nodes == []

    def test_bad_max_count(self, context, middleware):
        """Test a non-integer max count."""
        result = cmd_echo(["echo", "/c", "std_msgs/msg/String", "lots"], context)

        assert result.status == ResultStatus.USAGE
        assert middleware.nodes == []

    def test_unknown_type(self, context, middleware):
        """Test no subscription is created for an unknown type."""
        result = cmd_echo(["echo", "/c", "nope_msgs/msg/Nope", "1"], context)

        assert result.status == ResultStatus.LOOKUP
        assert result.message == "Message type nope_msgs/msg/Nope not found !"
        assert middleware.nodes == []


class TestHz:
    """Tests for the hz command."""

    def test_frequency_reports(self, context, middleware, output, make_message):
        """Test synthetic arrivals produce two frequency lines."""
        clock = iter([0, 0, 1_200_000_000, 2_500_000_000])
        context.clock_ns = lambda: next(clock)
        middleware.incoming = [make_message("std_msgs/msg/String", data="x")] * 3

        result = cmd_hz(["hz", "/chatter", "std_msgs/msg/String", "3"], context)

        assert result.ok
        assert output == ["Freq : 0.833333 hz", "Freq : 0.769231 hz"]
