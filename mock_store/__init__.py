"""In-memory reference implementation of the catalog, cart and order store."""
