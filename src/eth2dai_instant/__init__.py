"""Eth2Dai instant exchange: trade intents to Oasis direct proxy calls."""

__version__ = "0.1.0"
