# This file marks the routers package for API route modules.
# Health routes are mounted at the root; user and service routes under the versioned path.
