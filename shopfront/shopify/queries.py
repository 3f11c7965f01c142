"""GraphQL documents sent to the Storefront API."""

MONEY = "amount currencyCode"

VARIANT_FIELDS = f"""
  id
  title
  sku
  price {{ {MONEY} }}
  compareAtPrice {{ {MONEY} }}
  availableForSale
  quantityAvailable
  selectedOptions {{ name value }}
  image {{ id url altText }}
  weight
  weightUnit
"""

PRODUCT_FIELDS = f"""
  id
  title
  description
  handle
  priceRange {{
    minVariantPrice {{ {MONEY} }}
    maxVariantPrice {{ {MONEY} }}
  }}
  images(first: 10) {{ edges {{ node {{ id url altText }} }} }}
  variants(first: $variantsFirst) {{ edges {{ node {{ {VARIANT_FIELDS} }} }} }}
"""

PRODUCTS_QUERY = f"""
query getProducts($first: Int!, $variantsFirst: Int!) {{
  products(first: $first) {{ edges {{ node {{ {PRODUCT_FIELDS} }} }} }}
}}
"""

PRODUCT_QUERY = f"""
query getProduct($handle: String!, $variantsFirst: Int!) {{
  product(handle: $handle) {{ {PRODUCT_FIELDS} }}
}}
"""

PRODUCT_BY_ID_QUERY = f"""
query getProductById($id: ID!, $variantsFirst: Int!) {{
  product(id: $id) {{ {PRODUCT_FIELDS} }}
}}
"""

VARIANT_QUERY = f"""
query getVariant($id: ID!) {{
  node(id: $id) {{
    ... on ProductVariant {{
      {VARIANT_FIELDS}
      product {{ title }}
    }}
  }}
}}
"""

SHOP_QUERY = """
query getShop {
  shop {
    name
    description
    primaryDomain { url }
  }
}
"""

CUSTOMER_FIELDS = "id firstName lastName email phone acceptsMarketing"

USER_ERRORS = "customerUserErrors { field message code }"

CUSTOMER_CREATE_MUTATION = f"""
mutation customerCreate($input: CustomerCreateInput!) {{
  customerCreate(input: $input) {{
    customer {{ {CUSTOMER_FIELDS} }}
    {USER_ERRORS}
  }}
}}
"""

CUSTOMER_ACCESS_TOKEN_CREATE_MUTATION = f"""
mutation customerAccessTokenCreate($input: CustomerAccessTokenCreateInput!) {{
  customerAccessTokenCreate(input: $input) {{
    customerAccessToken {{ accessToken expiresAt }}
    {USER_ERRORS}
  }}
}}
"""

CUSTOMER_ACCESS_TOKEN_DELETE_MUTATION = """
mutation customerAccessTokenDelete($customerAccessToken: String!) {
  customerAccessTokenDelete(customerAccessToken: $customerAccessToken) {
    deletedAccessToken
    deletedCustomerAccessTokenId
    userErrors { field message }
  }
}
"""

CUSTOMER_QUERY = f"""
query getCustomer($customerAccessToken: String!) {{
  customer(customerAccessToken: $customerAccessToken) {{ {CUSTOMER_FIELDS} }}
}}
"""

LINE_ITEMS = f"""
  lineItems(first: 250) {{
    edges {{
      node {{
        title
        quantity
        originalTotalPrice {{ {MONEY} }}
        variant {{ id title image {{ url altText }} }}
      }}
    }}
  }}
"""

ORDER_SUMMARY_FIELDS = f"""
  id
  name
  orderNumber
  processedAt
  totalPrice {{ {MONEY} }}
  fulfillmentStatus
  financialStatus
  {LINE_ITEMS}
"""

MAILING_ADDRESS = "firstName lastName address1 address2 city province zip country phone"

ORDER_DETAIL_FIELDS = f"""
  {ORDER_SUMMARY_FIELDS}
  subtotalPrice {{ {MONEY} }}
  totalTax {{ {MONEY} }}
  totalShippingPrice {{ {MONEY} }}
  shippingAddress {{ {MAILING_ADDRESS} }}
  billingAddress {{ {MAILING_ADDRESS} }}
"""

CUSTOMER_ORDERS_QUERY = f"""
query getCustomerOrders($customerAccessToken: String!, $first: Int!) {{
  customer(customerAccessToken: $customerAccessToken) {{
    orders(first: $first) {{ edges {{ node {{ {ORDER_SUMMARY_FIELDS} }} }} }}
  }}
}}
"""

CUSTOMER_ORDER_DETAILS_QUERY = f"""
query getCustomerOrderDetails($customerAccessToken: String!, $first: Int!) {{
  customer(customerAccessToken: $customerAccessToken) {{
    orders(first: $first) {{ edges {{ node {{ {ORDER_DETAIL_FIELDS} }} }} }}
  }}
}}
"""

ADDRESS_FIELDS = f"id {MAILING_ADDRESS}"

CUSTOMER_ADDRESSES_QUERY = f"""
query getCustomerAddresses($customerAccessToken: String!) {{
  customer(customerAccessToken: $customerAccessToken) {{
    addresses(first: 10) {{ edges {{ node {{ {ADDRESS_FIELDS} }} }} }}
    defaultAddress {{ id }}
  }}
}}
"""

CUSTOMER_ADDRESS_CREATE_MUTATION = f"""
mutation customerAddressCreate($customerAccessToken: String!, $address: MailingAddressInput!) {{
  customerAddressCreate(customerAccessToken: $customerAccessToken, address: $address) {{
    customerAddress {{ {ADDRESS_FIELDS} }}
    {USER_ERRORS}
  }}
}}
"""

CUSTOMER_ADDRESS_UPDATE_MUTATION = f"""
mutation customerAddressUpdate($customerAccessToken: String!, $id: ID!, $address: MailingAddressInput!) {{
  customerAddressUpdate(customerAccessToken: $customerAccessToken, id: $id, address: $address) {{
    customerAddress {{ {ADDRESS_FIELDS} }}
    {USER_ERRORS}
  }}
}}
"""

CUSTOMER_ADDRESS_DELETE_MUTATION = f"""
mutation customerAddressDelete($customerAccessToken: String!, $id: ID!) {{
  customerAddressDelete(customerAccessToken: $customerAccessToken, id: $id) {{
    deletedCustomerAddressId
    {USER_ERRORS}
  }}
}}
"""

CART_CREATE_MUTATION = f"""
mutation cartCreate($input: CartInput!) {{
  cartCreate(input: $input) {{
    cart {{
      id
      checkoutUrl
      totalQuantity
      cost {{ totalAmount {{ {MONEY} }} }}
    }}
    userErrors {{ field message }}
  }}
}}
"""
