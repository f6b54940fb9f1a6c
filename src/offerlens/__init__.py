"""Commercial offer extraction from supplier documents."""
