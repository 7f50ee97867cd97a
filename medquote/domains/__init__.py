"""Domain layer (cart and quote models, payload rules).

Domain modules should not depend on UI or infrastructure.
"""
