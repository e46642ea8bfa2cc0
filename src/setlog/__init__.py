"""setlog - exercise set logging over a plaintext markdown vault."""
