import threading
import unittest

from control import Command, CommandChannel


class CommandChannelTests(unittest.TestCase):
    def test_drain_yields_in_arrival_order_and_empties(self) -> None:
        channel = CommandChannel()
        channel.send(Command.START)
        channel.send(Command.SKIP)
        channel.send(Command.STOP)

        self.assertEqual(
            [Command.START, Command.SKIP, Command.STOP],
            list(channel.drain()),
        )
        self.assertEqual([], list(channel.drain()))
        self.assertIsNone(channel.try_receive())

    def test_send_after_close_is_rejected(self) -> None:
        channel = CommandChannel()
        self.assertTrue(channel.send(Command.TOGGLE))
        channel.close()

        self.assertTrue(channel.is_closed)
        self.assertFalse(channel.send(Command.TOGGLE))
        self.assertEqual([Command.TOGGLE], list(channel.drain()))

    def test_producer_thread_hands_off_to_consumer(self) -> None:
        channel = CommandChannel()

        def produce() -> None:
            for _ in range(100):
                channel.send(Command.TOGGLE)

        producer = threading.Thread(target=produce)
        producer.start()
        producer.join()

        self.assertEqual(100, len(list(channel.drain())))


if __name__ == "__main__":
    unittest.main()
