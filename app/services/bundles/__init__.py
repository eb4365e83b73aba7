"""
Bundle order services package.

Groups order line items into bundles, pages through the order list,
translates statuses and exports the result as CSV for the Shopify admin.
"""
