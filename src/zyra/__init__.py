"""Zyra: scheduling, validation and execution tracking for agent workflows."""

__version__ = "0.1.0"
