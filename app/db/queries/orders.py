"""
Order-related GraphQL queries.

This module contains the read operations of the bundle order list:
- Paginated order listing with search filter
- Single order detail
"""

# =============================================
# FRAGMENTS
# =============================================

LINE_ITEM_FIELDS = """
fragment BundleLineItemFields on LineItem {
  id
  title
  quantity
  customAttributes {
    key
    value
  }
  originalUnitPriceSet {
    shopMoney {
      amount
      currencyCode
    }
  }
  lineItemGroup {
    id
    title
    quantity
  }
}
"""

# =============================================
# ORDER QUERIES
# =============================================

# Orders page; forward with first/after, backward with last/before
ORDERS_PAGE_QUERY = (
    """
query BundleOrdersPage(
  $first: Int
  $last: Int
  $after: String
  $before: String
  $query: String
  $reverse: Boolean
  $lineItemsFirst: Int!
) {
  orders(first: $first, last: $last, after: $after, before: $before, query: $query, reverse: $reverse) {
    edges {
      cursor
      node {
        id
        name
        createdAt
        displayFinancialStatus
        displayFulfillmentStatus
        shippingLine {
          title
        }
        totalPriceSet {
          shopMoney {
            amount
            currencyCode
          }
        }
        lineItems(first: $lineItemsFirst) {
          edges {
            node {
              ...BundleLineItemFields
            }
          }
        }
      }
    }
    pageInfo {
      hasNextPage
      hasPreviousPage
      startCursor
      endCursor
    }
  }
}
"""
    + LINE_ITEM_FIELDS
)

ORDER_DETAIL_QUERY = (
    """
query BundleOrderDetail($id: ID!, $lineItemsFirst: Int!) {
  order(id: $id) {
    id
    name
    createdAt
    displayFinancialStatus
    displayFulfillmentStatus
    shippingLine {
      title
    }
    totalPriceSet {
      shopMoney {
        amount
        currencyCode
      }
    }
    lineItems(first: $lineItemsFirst) {
      edges {
        node {
          ...BundleLineItemFields
        }
      }
    }
  }
}
"""
    + LINE_ITEM_FIELDS
)

SHOP_INFO_QUERY = """
query {
  shop {
    name
    id
    currencyCode
  }
}
"""
