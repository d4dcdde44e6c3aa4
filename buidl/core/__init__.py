"""Ledger core: token state machine, request boundary and configuration"""
