"""
Application Layer

This package implements the web application layer for the ENS resolver service, handling HTTP requests and
responses using the aiohttp framework.

Key Components:
- cli.py: Entry point for running the application
- server.py: Web server configuration, shared client lifecycle and middleware setup
- config.py: Configuration management using Pydantic settings
- metrics.py: Metrics abstraction over Telegraf/StatsD
- handlers/: Request handlers for the resolve and internal endpoints
- tasks.py: Background tasks for health monitoring and shadow provider comparison

The application uses two middleware layers:
- Statsd middleware for metrics collection
- Sentry middleware for error reporting

It provides the following endpoints:
- GET /api/ens/resolve/{address}: resolve an address or ENS name
- GET /internal/alive and /internal/ready: liveness and readiness probes
"""
