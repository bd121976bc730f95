from __future__ import annotations

import unittest
from datetime import datetime, timezone

from vrfraffle.draw import DrawRequested, NotificationChannel, RaffleEntered

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


class NotificationChannelTests(unittest.TestCase):
    def test_history_is_append_only_and_ordered(self):
        channel = NotificationChannel()
        first = RaffleEntered(participant="alice", payment=1, emitted_at=NOW)
        second = DrawRequested(subscription_id="sub", request_id="r1", emitted_at=NOW)
        channel.publish(first)
        channel.publish(second)
        self.assertEqual(channel.history, (first, second))
        self.assertIsInstance(channel.history, tuple)

    def test_subscribers_receive_notifications(self):
        channel = NotificationChannel()
        received = []
        channel.subscribe(received.append)
        event = RaffleEntered(participant="alice", payment=1, emitted_at=NOW)
        channel.publish(event)
        channel.unsubscribe(received.append)
        channel.publish(event)
        self.assertEqual(received, [event])

    def test_failing_subscriber_does_not_reach_publisher(self):
        channel = NotificationChannel()
        received = []

        def broken(notification):
            raise RuntimeError("indexer offline")

        channel.subscribe(broken)
        channel.subscribe(received.append)
        event = RaffleEntered(participant="alice", payment=1, emitted_at=NOW)
        with self.assertLogs("vrfraffle.draw.notifications", level="ERROR"):
            channel.publish(event)
        self.assertEqual(received, [event])
        self.assertEqual(channel.history, (event,))

    def test_kind_names(self):
        self.assertEqual(RaffleEntered.kind, "entered")
        self.assertEqual(DrawRequested.kind, "draw_requested")


if __name__ == "__main__":
    unittest.main()
