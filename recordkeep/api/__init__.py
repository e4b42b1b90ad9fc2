"""HTTP layer: dependencies, middleware and versioned routers."""
