"""Application services layer.

Services own session state (the quote cart) and coordinate domain models with
infrastructure such as the durable store. They should avoid UI concerns.
"""
