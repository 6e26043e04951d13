# This file marks the schemas package for API response models.
# Service views and user rows share the envelope and pagination models in `common`.
