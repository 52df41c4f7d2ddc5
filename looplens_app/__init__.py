"""
LoopLens App - Prediction Market Proposal Agent

Turns live crypto market telemetry into candidate prediction-market
questions, lets a decision service pick one, and creates the chosen
market on an EVM ledger contract.
"""

__version__ = "0.1.0"
__author__ = "LoopLens Team"
