"""Reading tracker API application package."""
