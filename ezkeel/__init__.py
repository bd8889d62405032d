"""Framework and database detection, Dockerfile and Caddyfile generation, and deploy config helpers."""

__version__ = "0.7.0"