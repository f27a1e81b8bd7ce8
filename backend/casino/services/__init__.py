"""Casino domain services: wallet, store, bonuses, KYC, redemptions, tickets.

HTTP routes and socket handlers import from here, keeping transport
concerns separated from balance rules and game mechanics.
"""
