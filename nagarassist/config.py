"""Service configuration with port assignments and URLs."""

SERVICE_PORTS = {
    "chat": 8020,
}


def get_service_url(service_name: str) -> str:
    """Get the full URL for a service."""
    port = SERVICE_PORTS.get(service_name)
    if not port:
        raise ValueError(f"Unknown service: {service_name}")
    return f"http://localhost:{port}"
