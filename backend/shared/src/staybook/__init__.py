"""Staybook core: availability, pricing and atomic booking with payment sessions."""

__version__ = "0.1.0"
