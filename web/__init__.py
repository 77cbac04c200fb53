"""
Web Package - FastAPI routers for the storefront pages.

Structure:
    web/
    ├── dependencies.py   # Service providers, session auth, flash, CSRF
    ├── home.py           # Landing page, dashboards, static pages
    ├── login.py          # Register, login, logout, access denied
    ├── cart.py           # Cart and checkout review
    ├── product.py        # Catalog and product maintenance
    ├── customer.py       # Customer profiles (admin)
    ├── order.py          # Orders, checkout, price lookup
    └── upload.py         # Proof-of-payment upload

Routers are mounted by web_service; nothing is imported here so
templates_utils can use web.dependencies without loading the routers.
"""
