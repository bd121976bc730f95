import os
import unittest
from datetime import timedelta
from unittest.mock import patch

from vrfraffle.config import RaffleConfig

ENV = {
    "RAFFLE_ENTRY_FEE": "10000000000000000",
    "RAFFLE_DRAW_INTERVAL_SECONDS": "30",
    "ORACLE_KEY_HASH": "0x474e34a077df58807dbe9c96d3c009b23b3c6d0cce433e59bbf5b34f823bc56c",
    "ORACLE_SUBSCRIPTION_ID": "1234",
    "ORACLE_IDENTITY": "0xcoordinator",
}


@patch("vrfraffle.config.load_dotenv")
class TestRaffleConfigFromEnv(unittest.TestCase):
    def test_reads_required_and_defaults(self, mock_load_dotenv):
        with patch.dict(os.environ, ENV, clear=True):
            config = RaffleConfig.from_env()
        mock_load_dotenv.assert_called_once()
        self.assertEqual(config.entry_fee, 10**16)
        self.assertEqual(config.draw_interval, timedelta(seconds=30))
        self.assertEqual(config.subscription_id, "1234")
        self.assertEqual(config.oracle_identity, "0xcoordinator")
        self.assertEqual(config.callback_gas_limit, 500_000)
        self.assertEqual(config.request_confirmations, 3)
        self.assertEqual(config.num_words, 1)

    def test_optional_overrides(self, mock_load_dotenv):
        env = {
            **ENV,
            "ORACLE_CALLBACK_GAS_LIMIT": "250000",
            "ORACLE_REQUEST_CONFIRMATIONS": "5",
        }
        with patch.dict(os.environ, env, clear=True):
            config = RaffleConfig.from_env()
        params = config.randomness_params()
        self.assertEqual(params.callback_gas_limit, 250_000)
        self.assertEqual(params.request_confirmations, 5)
        self.assertEqual(params.key_hash, ENV["ORACLE_KEY_HASH"])
        self.assertEqual(params.num_words, 1)

    def test_missing_variable(self, mock_load_dotenv):
        env = {k: v for k, v in ENV.items() if k != "ORACLE_IDENTITY"}
        with patch.dict(os.environ, env, clear=True):
            with self.assertRaises(RuntimeError) as ctx:
                RaffleConfig.from_env()
        self.assertIn("ORACLE_IDENTITY", str(ctx.exception))

    def test_malformed_number(self, mock_load_dotenv):
        for value in ("abc", "0", "-5"):
            with self.subTest(value=value):
                with patch.dict(os.environ, {**ENV, "RAFFLE_ENTRY_FEE": value}, clear=True):
                    with self.assertRaises(ValueError):
                        RaffleConfig.from_env()

    def test_zero_draw_interval_accepted(self, mock_load_dotenv):
        env = {**ENV, "RAFFLE_DRAW_INTERVAL_SECONDS": "0"}
        with patch.dict(os.environ, env, clear=True):
            config = RaffleConfig.from_env()
        self.assertEqual(config.draw_interval, timedelta(0))

    def test_negative_draw_interval_rejected(self, mock_load_dotenv):
        for value in ("-1", "soon"):
            with self.subTest(value=value):
                env = {**ENV, "RAFFLE_DRAW_INTERVAL_SECONDS": value}
                with patch.dict(os.environ, env, clear=True):
                    with self.assertRaises(ValueError):
                        RaffleConfig.from_env()


class TestRaffleConfigValidation(unittest.TestCase):
    def _kwargs(self, **overrides):
        values = dict(
            entry_fee=1,
            draw_interval=timedelta(seconds=1),
            key_hash="k",
            subscription_id="s",
            oracle_identity="o",
        )
        values.update(overrides)
        return values

    def test_rejects_invalid_values(self):
        for overrides in (
            {"entry_fee": 0},
            {"draw_interval": timedelta(seconds=-1)},
            {"oracle_identity": ""},
            {"num_words": 2},
        ):
            with self.subTest(overrides=overrides):
                with self.assertRaises(ValueError):
                    RaffleConfig(**self._kwargs(**overrides))

    def test_is_immutable(self):
        config = RaffleConfig(**self._kwargs())
        with self.assertRaises(AttributeError):
            config.entry_fee = 5  # type: ignore[misc]


if __name__ == "__main__":
    unittest.main()
