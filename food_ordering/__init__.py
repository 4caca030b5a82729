"""
Food Ordering API - accounts, menus, orders and reviews
"""
__version__ = "1.0.0"
