"""
Engine layer - domain rules built on the stable kernel.
"""
