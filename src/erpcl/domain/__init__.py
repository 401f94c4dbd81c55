"""Domain layer for erpcl: entities, forms and one service per screen.

Import services from their modules, e.g. ``erpcl.domain.ledger``.
"""
