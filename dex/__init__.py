"""
Web3 venue for the delta arbitrage bot: config, contracts, prices and token writes.
"""
