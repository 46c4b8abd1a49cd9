"""Storefront package.

Organized by feature modules (users, products, carts, orders, payments, ...)
with a thin Flask controller layer over service and repository layers.
"""
