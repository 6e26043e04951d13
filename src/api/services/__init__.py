# This file marks the services package for API business logic modules.
# It exists so routers can depend on cohesive service classes instead of raw store calls.
# Service modules run the access policy gates before touching any record.
# That separation makes API behavior easier to test and maintain.
