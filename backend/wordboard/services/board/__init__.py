"""Board session domain: cards, derived state, turns and reconciliation.

Everything in this package is transport free. Socket handlers and HTTP
routes import from here; nothing here imports Flask or Socket.IO.
"""
