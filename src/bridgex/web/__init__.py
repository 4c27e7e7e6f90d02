"""Web layer: contracts, services and controllers for the bridge API."""
