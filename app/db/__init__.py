"""
Módulo de acceso a Shopify para el listado de pedidos con bundles.

- queries: Consultas GraphQL de pedidos
- shopify_clients: Clientes GraphQL (conexión, rate limiting, pedidos)
"""
