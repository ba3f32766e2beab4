"""External services: tenant broker and multitenant lookup."""
